"""Time bucketing and hotspot detection over timestamped comments."""

import math
from collections.abc import Iterable, Sequence

from evalboard.core.exceptions import InvalidArgumentError
from evalboard.core.logging import get_logger
from evalboard.session.models import Comment
from evalboard.statistics.binner import format_number

from .models import Hotspot, IntervalSeries, TimelineSummary

logger = get_logger(__name__)

MIN_INTERVAL_SECONDS = 30
MAX_INTERVALS = 20
DEFAULT_VIDEO_DURATION = 300
DEFAULT_CLUSTER_WIDTH = 10
DEFAULT_TOP_N = 3


def format_timestamp(seconds: float) -> str:
    """Format seconds as ``m:ss``."""
    minutes = math.floor(seconds / 60)
    remainder = format_number(seconds % 60)
    return f"{minutes}:{remainder.rjust(2, '0')}"


def _check_duration(video_duration: float) -> None:
    if not math.isfinite(video_duration) or video_duration < 0:
        raise InvalidArgumentError(
            f"video_duration must be a non-negative number, got {video_duration}"
        )


class TimelineBucketizer:
    """Groups comments along the video timeline.

    Intervals are ``max(30, ceil(duration / 20))`` seconds wide and start
    at 0, 1×width, ... while the start is before the end of the video.
    Comments whose interval does not exist (past the end of the video) are
    dropped.
    """

    @staticmethod
    def interval_size(video_duration: float) -> int:
        """Width of each timeline interval in seconds."""
        _check_duration(video_duration)
        return max(MIN_INTERVAL_SECONDS, math.ceil(video_duration / MAX_INTERVALS))

    def compute_intervals(
        self,
        comments: Iterable[Comment],
        video_duration: float,
    ) -> IntervalSeries:
        """Count comments per interval.

        Args:
            comments: Timestamped comments.
            video_duration: Video length in seconds.

        Returns:
            IntervalSeries with labels "m:ss-m:ss"; the last interval's end
            is clamped to the video duration.

        Raises:
            InvalidArgumentError: If video_duration is negative or not finite.
        """
        size = self.interval_size(video_duration)

        counts: dict[int, int] = {}
        start = 0
        while start < video_duration:
            counts[start] = 0
            start += size

        dropped = 0
        for comment in comments:
            bucket = math.floor(comment.timestamp / size) * size
            if bucket in counts:
                counts[bucket] += 1
            else:
                dropped += 1

        if dropped:
            logger.debug(
                "comments_outside_video_dropped",
                dropped=dropped,
                video_duration=video_duration,
            )

        starts = list(counts)
        labels = [
            f"{format_timestamp(s)}-{format_timestamp(min(s + size, video_duration))}"
            for s in starts
        ]
        return IntervalSeries(
            interval_size=size,
            starts=starts,
            labels=labels,
            counts=list(counts.values()),
        )

    @staticmethod
    def compute_peak_intervals(series: IntervalSeries) -> list[str]:
        """Labels of every interval whose count equals the maximum."""
        if not series.counts:
            return []
        peak = max(series.counts)
        return [
            label
            for label, count in zip(series.labels, series.counts, strict=True)
            if count == peak
        ]

    def compute_hotspots(
        self,
        comments: Iterable[Comment],
        cluster_width: float = DEFAULT_CLUSTER_WIDTH,
        top_n: int = DEFAULT_TOP_N,
    ) -> list[Hotspot]:
        """Find the busiest short windows of the timeline.

        Each timestamp is rounded down to a multiple of ``cluster_width``;
        windows are ranked by comment count, ties keeping first-seen order.

        Raises:
            InvalidArgumentError: If cluster_width <= 0 or top_n < 0.
        """
        if not math.isfinite(cluster_width) or cluster_width <= 0:
            raise InvalidArgumentError(
                f"cluster_width must be positive, got {cluster_width}"
            )
        if top_n < 0:
            raise InvalidArgumentError(f"top_n cannot be negative, got {top_n}")

        clusters: dict[float, int] = {}
        for comment in comments:
            start = math.floor(comment.timestamp / cluster_width) * cluster_width
            clusters[start] = clusters.get(start, 0) + 1

        ranked = sorted(clusters.items(), key=lambda item: item[1], reverse=True)
        return [
            Hotspot(start=start, time=format_timestamp(start), count=count)
            for start, count in ranked[:top_n]
        ]

    def summarize(
        self,
        comments: Sequence[Comment],
        video_duration: float = DEFAULT_VIDEO_DURATION,
        cluster_width: float = DEFAULT_CLUSTER_WIDTH,
        top_n: int = DEFAULT_TOP_N,
    ) -> TimelineSummary:
        """Intervals, peaks and hotspots for a set of comments."""
        series = self.compute_intervals(comments, video_duration)
        n_intervals = len(series.counts)

        return TimelineSummary(
            video_duration=video_duration,
            total_comments=len(comments),
            intervals=series,
            average_per_interval=len(comments) / n_intervals if n_intervals else 0.0,
            max_count=max(series.counts, default=0),
            peak_intervals=self.compute_peak_intervals(series),
            hotspots=self.compute_hotspots(comments, cluster_width, top_n),
        )
