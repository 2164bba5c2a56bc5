"""
Post-reconstruction filtering of processed events.
"""

from typing import Iterable, List

from ..core.types import ProcessedEvent


class EventFilter:
    """Filters processed events before aggregation."""

    def __init__(self, config):
        """
        Initialize with trace configuration.

        Args:
            config: TraceConfig instance
        """
        self.config = config

    def apply(self, events: List[ProcessedEvent]) -> List[ProcessedEvent]:
        """
        Apply the filters enabled by the configuration.

        Args:
            events: Processed events, sorted by start time

        Returns:
            New list of kept events (same order)
        """
        return self.filter_by_duration(events, self.config.min_duration_ms)

    @staticmethod
    def filter_by_duration(events: List[ProcessedEvent], min_duration_ms: float) -> List[ProcessedEvent]:
        """
        Keep events lasting at least min_duration_ms.

        The threshold is an inclusive floor; a threshold of 0 or less keeps
        every event.
        """
        if min_duration_ms <= 0:
            return list(events)
        return [e for e in events if e.duration >= min_duration_ms]

    @staticmethod
    def filter_by_category(events: List[ProcessedEvent], categories: Iterable[str]) -> List[ProcessedEvent]:
        wanted = set(categories)
        return [e for e in events if e.category in wanted]

    @staticmethod
    def filter_by_time_range(events: List[ProcessedEvent], start_ms: float, end_ms: float) -> List[ProcessedEvent]:
        """Keep events lying entirely inside [start_ms, end_ms]."""
        return [e for e in events if e.start_time >= start_ms and e.end_time <= end_ms]
