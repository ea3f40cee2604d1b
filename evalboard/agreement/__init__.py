"""Inter-evaluator agreement analysis."""

from .analyzer import AgreementAnalyzer
from .models import (
    AgreementLevel,
    AgreementReport,
    AgreementStats,
    AgreementStatus,
    CriterionAgreement,
)

__all__ = [
    "AgreementAnalyzer",
    "AgreementLevel",
    "AgreementReport",
    "AgreementStats",
    "AgreementStatus",
    "CriterionAgreement",
]
