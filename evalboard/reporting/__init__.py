"""Session report assembly."""

from .models import SessionReport
from .reporter import SessionAnalyticsReporter

__all__ = ["SessionAnalyticsReporter", "SessionReport"]
