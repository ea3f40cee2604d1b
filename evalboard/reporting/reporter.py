"""Session reporter assembling every analytics component."""

from typing import Any

from evalboard.agreement import AgreementAnalyzer
from evalboard.core.logging import bind_context, get_logger
from evalboard.core.settings import AnalyticsSettings
from evalboard.scoring import ScoreAggregator
from evalboard.session.models import Session
from evalboard.statistics import DistributionBinner
from evalboard.timeline import TimelineBucketizer

from .models import SessionReport

logger = get_logger(__name__)


class SessionAnalyticsReporter:
    """Runs each analytics component on a session snapshot.

    Components are independent; the reporter only wires inputs to them
    and collects their outputs. Defaults for video duration, hotspot
    clustering and agreement bands come from AnalyticsSettings.
    """

    def __init__(self, settings: AnalyticsSettings | None = None) -> None:
        self.settings = settings or AnalyticsSettings()
        self._aggregator = ScoreAggregator()
        self._agreement = AgreementAnalyzer(
            high_threshold=self.settings.high_agreement_threshold,
            moderate_threshold=self.settings.moderate_agreement_threshold,
        )
        self._binner = DistributionBinner()
        self._timeline = TimelineBucketizer()

    def build_report(
        self,
        session: Session,
        video_duration: float | None = None,
        cluster_width: float | None = None,
        top_n: int | None = None,
    ) -> SessionReport:
        """Compute the full analytics report for a session.

        Args:
            session: Session snapshot.
            video_duration: Overrides the session's duration.
            cluster_width: Hotspot window width in seconds.
            top_n: Number of hotspots to keep.

        Returns:
            SessionReport; has_data is False when there are no evaluations.

        Raises:
            InvalidArgumentError: If a scalar parameter is out of range.
        """
        evaluations = list(session.evaluations)
        overview = self._aggregator.compute_session_overview(evaluations)

        with bind_context(session_id=session.id):
            if not evaluations:
                logger.info("session_report_no_data")
                return SessionReport(
                    session_id=session.id,
                    session_name=session.name,
                    has_data=False,
                    overview=overview,
                )

            duration = self._resolve_duration(session, video_duration)
            criteria = session.template.criteria
            categories = session.template.categories
            all_scores = session.all_scores

            distributions = []
            for criterion in criteria:
                distribution = self._binner.compute_criterion_distribution(
                    all_scores, criteria, criterion.id
                )
                if distribution is not None:
                    distributions.append(distribution)

            report = SessionReport(
                session_id=session.id,
                session_name=session.name,
                has_data=True,
                overview=overview,
                ranking=self._aggregator.compute_evaluator_ranking(
                    evaluations, criteria, session.users
                ),
                category_averages=[
                    self._aggregator.compute_category_average(category, all_scores)
                    for category in categories
                ],
                criterion_averages=self._aggregator.compute_criterion_averages(
                    all_scores, criteria
                ),
                category_profile=self._aggregator.compute_category_profile(
                    categories, all_scores
                ),
                agreement=self._agreement.analyze(evaluations, criteria),
                distributions=distributions,
                timeline=self._timeline.summarize(
                    session.all_comments,
                    video_duration=duration,
                    cluster_width=(
                        cluster_width
                        if cluster_width is not None
                        else self.settings.cluster_width
                    ),
                    top_n=top_n if top_n is not None else self.settings.top_n,
                ),
            )
            logger.info(
                "session_report_built",
                evaluations=len(evaluations),
                criteria=len(criteria),
                comments=report.timeline.total_comments if report.timeline else 0,
            )
            return report

    def _resolve_duration(
        self, session: Session, video_duration: float | None
    ) -> float:
        if video_duration is not None:
            return video_duration
        if session.video_duration is not None:
            return session.video_duration
        return float(self.settings.video_duration)

    def format_text_summary(self, report: SessionReport) -> str:
        """Generate a human-readable text summary."""
        lines: list[str] = []

        lines.append("=" * 60)
        lines.append(f"Session: {report.session_name or report.session_id}")
        lines.append("=" * 60)

        o = report.overview
        lines.append("")
        lines.append("Overview:")
        lines.append(
            f"  Evaluations: {o.completed_evaluations}/{o.total_evaluations} complete"
        )
        lines.append(f"  Average Score: {o.average_score:.1f}")

        if not report.has_data:
            lines.append("")
            lines.append("No evaluations have been submitted yet.")
            lines.append("=" * 60)
            return "\n".join(lines)

        lines.append("")
        lines.append("Evaluator Ranking:")
        for position, entry in enumerate(report.ranking, start=1):
            lines.append(f"  {position}. {entry.evaluator_name}: {entry.score:.1f}")

        agreement = report.agreement
        lines.append("")
        if agreement is None or not agreement.is_sufficient:
            lines.append("Agreement: at least two evaluators are required")
        else:
            lines.append(f"Agreement: {(agreement.overall_agreement or 0) * 100:.1f}%")
            for record in agreement.criteria:
                lines.append(
                    f"  {record.criterion_name}: {record.agreement * 100:.1f}% "
                    f"({record.level.value}, sd={record.stddev:.2f})"
                )

        if report.timeline:
            t = report.timeline
            lines.append("")
            lines.append(
                f"Comments: {t.total_comments} "
                f"({t.average_per_interval:.1f} per interval)"
            )
            if t.total_comments:
                lines.append(f"  Peak intervals: {', '.join(t.peak_intervals)}")
                for hotspot in t.hotspots:
                    lines.append(f"  Hotspot {hotspot.time}: {hotspot.count}")

        lines.append("")
        lines.append("=" * 60)
        return "\n".join(lines)

    def format_json_summary(self, report: SessionReport) -> dict[str, Any]:
        """Generate JSON-serializable summary."""
        return report.to_dict()
