"""
Per-file aggregation of processed events.
"""

from collections import defaultdict
from typing import Dict, List

from ..algorithms import get_top_n
from ..core.types import PHASES, FileEvents, ProcessedEvent, get_phase

# Paths with more segments than this are shortened for display
MAX_DISPLAY_SEGMENTS = 4
DISPLAY_TAIL_SEGMENTS = 3


def shorten_path(file_path: str) -> str:
    """
    Shorten a file path for display.

    Paths inside node_modules keep everything from the last 'node_modules'
    onward. Other paths with more than 4 '/'-separated segments are reduced
    to '.../' plus their last 3 segments.

    Example:
        /home/me/project/src/app/main.ts -> .../src/app/main.ts

    Args:
        file_path: Full file path

    Returns:
        Display path; identity and grouping always use the full path
    """
    node_modules_index = file_path.rfind('node_modules')
    if node_modules_index != -1:
        return file_path[node_modules_index:]

    parts = file_path.split('/')
    if len(parts) > MAX_DISPLAY_SEGMENTS:
        return '.../' + '/'.join(parts[-DISPLAY_TAIL_SEGMENTS:])

    return file_path


class FileAggregator:
    """Groups processed events by source file."""

    def aggregate_by_file(self, events: List[ProcessedEvent]) -> List[FileEvents]:
        """
        Group events by file path and total their time per phase.

        Events without a file path are left out. check and checkTypes both
        count as check time; categories outside the four phases (program)
        count toward no bucket.

        Args:
            events: Processed events

        Returns:
            List of FileEvents sorted by total_time, slowest first. Files with
            equal totals keep the order in which they were first seen.
        """
        grouped: Dict[str, List[ProcessedEvent]] = defaultdict(list)
        for event in events:
            if event.file_path:
                grouped[event.file_path].append(event)

        files = []
        for file_path, file_events in grouped.items():
            timings = self.calculate_file_timing(file_events)
            files.append(FileEvents(
                file_path=file_path,
                short_path=shorten_path(file_path),
                events=file_events,
                total_time=timings['total'],
                parse_time=timings['parse'],
                bind_time=timings['bind'],
                check_time=timings['check'],
                emit_time=timings['emit'],
            ))

        files.sort(key=lambda f: f.total_time, reverse=True)
        return files

    @staticmethod
    def calculate_file_timing(events: List[ProcessedEvent]) -> Dict[str, float]:
        """
        Sum event durations into the four phase buckets.

        Returns:
            Dictionary with 'parse', 'bind', 'check', 'emit' and 'total'
        """
        timings = {phase: 0.0 for phase in PHASES}
        for event in events:
            phase = get_phase(event.category)
            if phase is not None:
                timings[phase] += event.duration

        timings['total'] = sum(timings[phase] for phase in PHASES)
        return timings

    @staticmethod
    def get_top_files(files: List[FileEvents], n: int) -> List[FileEvents]:
        """Return the n slowest files of an already sorted file list."""
        return files[:max(0, n)]

    @staticmethod
    def get_top_files_by_phase(files: List[FileEvents], phase: str, n: int) -> List[FileEvents]:
        """
        Return the n files spending the most time in one phase.

        Args:
            files: Aggregated files
            phase: One of 'parse', 'bind', 'check', 'emit'
            n: Number of files

        Raises:
            ValueError: If phase is not one of the four phases
        """
        if phase not in PHASES:
            raise ValueError(f"Invalid phase '{phase}'. Must be one of: {list(PHASES)}")
        return get_top_n(files, n, key=lambda f: f.phase_time(phase))

    @staticmethod
    def calculate_category_stats(events: List[ProcessedEvent]) -> Dict[str, Dict]:
        """Count events and total their time per raw category."""
        stats: Dict[str, Dict] = defaultdict(lambda: {'count': 0, 'total_time': 0.0})
        for event in events:
            stats[event.category]['count'] += 1
            stats[event.category]['total_time'] += event.duration
        return dict(stats)
