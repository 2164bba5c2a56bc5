"""
Timeline construction and phase statistics.
"""

import logging
import weakref
from typing import Dict, List, Optional

from ..core.types import (
    PHASES,
    FileEvents,
    PhaseInfo,
    PhaseTiming,
    ProcessedEvent,
    TimelineData,
    get_phase,
)
from ..filters import EventFilter
from ..formatters import format_duration
from .file_aggregator import FileAggregator

logger = logging.getLogger(__name__)


class TimelineBuilder:
    """Builds timeline data from processed events."""

    def __init__(self, file_aggregator: Optional[FileAggregator] = None):
        """
        Initialize with a file aggregator.

        Args:
            file_aggregator: FileAggregator instance
        """
        self.file_aggregator = file_aggregator or FileAggregator()
        # timeline -> {(start_ms, end_ms): filtered timeline}; entries die with the timeline
        self._range_cache = weakref.WeakKeyDictionary()

    def build_timeline(self, events: List[ProcessedEvent]) -> TimelineData:
        """
        Build the timeline of a compilation.

        Args:
            events: Processed events sorted by start time

        Returns:
            TimelineData with overall bounds, phase statistics and per-file
            aggregation. Empty input gives an all-zero timeline.
        """
        if not events:
            return self.create_empty_timeline()

        start_time = min(e.start_time for e in events)
        end_time = max(e.end_time for e in events)

        return TimelineData(
            total_duration=end_time - start_time,
            start_time=start_time,
            end_time=end_time,
            phases=self.calculate_phase_info(events),
            files=self.file_aggregator.aggregate_by_file(events),
            events=events,
        )

    @staticmethod
    def create_empty_timeline() -> TimelineData:
        return TimelineData(
            total_duration=0.0,
            start_time=0.0,
            end_time=0.0,
            phases=PhaseInfo(),
            files=[],
            events=[],
        )

    @classmethod
    def calculate_phase_info(cls, events: List[ProcessedEvent]) -> PhaseInfo:
        """Group events into the four phases and compute statistics for each."""
        phase_events: Dict[str, List[ProcessedEvent]] = {phase: [] for phase in PHASES}
        for event in events:
            phase = get_phase(event.category)
            if phase is not None:
                phase_events[phase].append(event)

        return PhaseInfo(**{
            phase: cls.calculate_phase_timing(phase_events[phase]) for phase in PHASES
        })

    @staticmethod
    def calculate_phase_timing(events: List[ProcessedEvent]) -> PhaseTiming:
        """
        Compute count, total, average, max and min duration in one pass.

        Returns:
            PhaseTiming; all zeros when events is empty
        """
        if not events:
            return PhaseTiming()

        total_time = 0.0
        max_time = float('-inf')
        min_time = float('inf')
        for event in events:
            total_time += event.duration
            if event.duration > max_time:
                max_time = event.duration
            if event.duration < min_time:
                min_time = event.duration

        return PhaseTiming(
            total_time=total_time,
            count=len(events),
            avg_time=total_time / len(events),
            max_time=max_time,
            min_time=min_time,
        )

    def filter_timeline_by_range(self, timeline: TimelineData, start_ms: float, end_ms: float) -> TimelineData:
        """
        Rebuild a timeline from the events lying fully inside a time range.

        Results are cached per timeline object and range. Timelines are never
        modified after they are built, so a cached result stays valid until
        its source timeline is garbage collected.

        Args:
            timeline: Source timeline
            start_ms: Range start in milliseconds
            end_ms: Range end in milliseconds

        Returns:
            New TimelineData for the range
        """
        cache_key = (start_ms, end_ms)
        timeline_cache = self._range_cache.get(timeline)
        if timeline_cache is not None and cache_key in timeline_cache:
            return timeline_cache[cache_key]

        filtered = EventFilter.filter_by_time_range(timeline.events, start_ms, end_ms)
        result = self.build_timeline(filtered)

        if timeline_cache is None:
            timeline_cache = {}
            self._range_cache[timeline] = timeline_cache
        timeline_cache[cache_key] = result

        logger.debug("Range %.3f-%.3fms kept %d of %d events",
                     start_ms, end_ms, len(filtered), len(timeline.events))
        return result

    def clear_range_filter_cache(self, timeline: Optional[TimelineData] = None) -> None:
        """Drop cached range results for one timeline, or for all of them."""
        if timeline is None:
            self._range_cache.clear()
        else:
            self._range_cache.pop(timeline, None)

    @staticmethod
    def get_file_timeline(timeline: TimelineData, file_path: str) -> Optional[FileEvents]:
        return next((f for f in timeline.files if f.file_path == file_path), None)

    @staticmethod
    def search_files(timeline: TimelineData, pattern: str) -> List[FileEvents]:
        """Case-insensitive substring search over full and short file paths."""
        needle = pattern.lower()
        return [
            f for f in timeline.files
            if needle in f.file_path.lower() or needle in f.short_path.lower()
        ]

    @staticmethod
    def get_timeline_summary(timeline: TimelineData) -> Dict:
        """
        Summarize a timeline for display.

        Returns:
            Dictionary with 'total_duration_formatted', 'file_count',
            'event_count' and 'phase_breakdown' (name, time, percentage)
        """
        phases = timeline.phases
        total_phase_time = phases.total_time

        phase_breakdown = []
        for phase in PHASES:
            time = getattr(phases, phase).total_time
            phase_breakdown.append({
                'name': phase.capitalize(),
                'time': time,
                'percentage': time / total_phase_time * 100 if total_phase_time > 0 else 0.0,
            })

        return {
            'total_duration_formatted': format_duration(timeline.total_duration),
            'file_count': len(timeline.files),
            'event_count': len(timeline.events),
            'phase_breakdown': phase_breakdown,
        }
