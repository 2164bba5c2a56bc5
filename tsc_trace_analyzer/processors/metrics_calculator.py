"""
Compilation metrics and hotspot detection.
"""

from typing import Dict, List, Sequence

from ..algorithms import calculate_percentiles, get_top_n
from ..core.types import (
    DEFAULT_PERCENTILES,
    PHASES,
    CompilationMetrics,
    FileEvents,
    Hotspots,
    HotspotItem,
    ProcessedEvent,
    TimelineData,
)

DEFAULT_TOP_FILES = 20
DEFAULT_TOP_PHASE_FILES = 10


class MetricsCalculator:
    """Calculates summary metrics and hotspot lists from a timeline."""

    def __init__(self, top_files: int = DEFAULT_TOP_FILES, top_phase_files: int = DEFAULT_TOP_PHASE_FILES):
        """
        Initialize with hotspot list sizes.

        Args:
            top_files: Size of the overall slowest-files list
            top_phase_files: Size of the slowest parse/check lists
        """
        self.top_files = top_files
        self.top_phase_files = top_phase_files

    def calculate_metrics(self, timeline: TimelineData) -> CompilationMetrics:
        """
        Calculate compilation metrics for a timeline.

        Args:
            timeline: TimelineData from TimelineBuilder.build_timeline()

        Returns:
            CompilationMetrics with totals, phase statistics and hotspots
        """
        return CompilationMetrics(
            total_files=len(timeline.files),
            total_duration=timeline.total_duration,
            total_events=len(timeline.events),
            phases=timeline.phases,
            hotspots=self.calculate_hotspots(timeline.files),
        )

    def calculate_hotspots(self, files: List[FileEvents]) -> Hotspots:
        """
        Identify the slowest files overall and per phase.

        Files arrive sorted by total time, so the overall list is a prefix.
        The parse and check lists use top-N selection and leave out files
        that spent no time in that phase.
        """
        slowest_files = [
            HotspotItem(file_path=f.file_path, short_path=f.short_path, duration=f.total_time)
            for f in files[:self.top_files]
        ]

        return Hotspots(
            slowest_files=slowest_files,
            slowest_parse_files=self._phase_hotspots(files, 'parse'),
            slowest_check_files=self._phase_hotspots(files, 'check'),
        )

    def _phase_hotspots(self, files: List[FileEvents], phase: str) -> List[HotspotItem]:
        top = get_top_n(files, self.top_phase_files, key=lambda f: f.phase_time(phase))
        return [
            HotspotItem(
                file_path=f.file_path,
                short_path=f.short_path,
                duration=f.phase_time(phase),
                category=phase,
            )
            for f in top
            if f.phase_time(phase) > 0
        ]

    @staticmethod
    def calculate_percentiles(
        events: List[ProcessedEvent],
        percentiles: Sequence[float] = DEFAULT_PERCENTILES
    ) -> Dict[float, float]:
        """
        Calculate percentiles of event durations.

        Args:
            events: Processed events
            percentiles: Requested percentiles in [0, 100]

        Returns:
            Dict mapping percentile -> duration in ms (0 for empty input)
        """
        return calculate_percentiles([e.duration for e in events], percentiles)

    @staticmethod
    def compare_metrics(baseline: CompilationMetrics, current: CompilationMetrics) -> Dict:
        """
        Compare two compilations.

        Percentages are relative to the baseline and are 0 when the baseline
        value is 0.

        Returns:
            Dictionary with 'duration_diff', 'duration_diff_percentage',
            'file_count_diff' and 'phase_diffs' ({phase: {'diff', 'percentage'}})
        """
        def diff(base: float, curr: float) -> Dict[str, float]:
            delta = curr - base
            return {'diff': delta, 'percentage': delta / base * 100 if base > 0 else 0.0}

        duration = diff(baseline.total_duration, current.total_duration)
        return {
            'duration_diff': duration['diff'],
            'duration_diff_percentage': duration['percentage'],
            'file_count_diff': current.total_files - baseline.total_files,
            'phase_diffs': {
                phase: diff(getattr(baseline.phases, phase).total_time,
                            getattr(current.phases, phase).total_time)
                for phase in PHASES
            },
        }
