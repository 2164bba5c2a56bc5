"""
Event reconstruction: raw trace events to normalized, time-ordered events.
"""

import bisect
import logging
from collections import defaultdict
from operator import attrgetter
from typing import DefaultDict, Iterable, List, Optional, Set, Tuple

from ..core.types import (
    PHASE_BEGIN,
    PHASE_COMPLETE,
    PHASE_END,
    PHASE_METADATA,
    ProcessedEvent,
    RawEvent,
)
from ..extractors import ArgsExtractor

logger = logging.getLogger(__name__)

_start_time = attrgetter('start_time')

StackKey = Tuple[object, object, object, object]


def insert_sorted(events: List[ProcessedEvent], event: ProcessedEvent) -> None:
    """
    Insert an event keeping the list ordered by start_time.

    Appends directly when the event belongs at the end (the common case for
    time-ordered input); otherwise binary-searches the insertion point. Equal
    start times keep arrival order.
    """
    if not events or event.start_time >= events[-1].start_time:
        events.append(event)
        return
    index = bisect.bisect_right(events, event.start_time, key=_start_time)
    events.insert(index, event)


class EventProcessor:
    """Reconstructs processed events from raw trace events."""

    def __init__(self, args_extractor: Optional[ArgsExtractor] = None):
        """
        Initialize with an args extractor.

        Args:
            args_extractor: ArgsExtractor instance used for file path resolution
        """
        self.args_extractor = args_extractor or ArgsExtractor()

    def process_events(self, raw_events: Iterable[RawEvent]) -> List[ProcessedEvent]:
        """
        Turn raw events into processed events sorted by start time.

        1. Drop metadata events and sort the rest by timestamp
        2. Emit complete (X) events with their own duration
        3. Match begin (B) / end (E) pairs per (pid, tid, name, cat) using a
           LIFO stack, so nested spans of the same name close innermost-first
        4. Convert microseconds to milliseconds relative to the earliest event

        End events without a pending begin are dropped, and begin events that
        never see their end produce no output.

        Args:
            raw_events: Raw trace events in any order

        Returns:
            List of processed events, non-decreasing by start_time
        """
        events = [e for e in raw_events if e.get('ph') != PHASE_METADATA]
        if not events:
            return []

        events.sort(key=lambda e: e.get('ts', 0))
        min_timestamp = events[0].get('ts', 0)

        processed: List[ProcessedEvent] = []
        stacks: DefaultDict[StackKey, List[RawEvent]] = defaultdict(list)
        unmatched_ends = 0

        for event in events:
            phase = event.get('ph')

            if phase == PHASE_COMPLETE:
                args = event.get('args')
                insert_sorted(processed, ProcessedEvent(
                    id=f"event-{len(processed)}",
                    name=event.get('name', ''),
                    category=event.get('cat', ''),
                    start_time=(event.get('ts', 0) - min_timestamp) / 1000,
                    duration=max(0, event.get('dur') or 0) / 1000,
                    file_path=self.args_extractor.extract_file_path(args),
                    args=dict(args) if args is not None else None,
                ))
            elif phase == PHASE_BEGIN:
                stacks[self._stack_key(event)].append(event)
            elif phase == PHASE_END:
                stack = stacks.get(self._stack_key(event))
                if not stack:
                    unmatched_ends += 1
                    continue
                begin = stack.pop()
                insert_sorted(processed, self._build_pair_event(begin, event, min_timestamp, len(processed)))

        unmatched_begins = sum(len(stack) for stack in stacks.values())
        if unmatched_ends or unmatched_begins:
            logger.debug("Dropped %d unmatched end and %d unmatched begin events",
                         unmatched_ends, unmatched_begins)

        return processed

    @staticmethod
    def _stack_key(event: RawEvent) -> StackKey:
        return (event.get('pid'), event.get('tid'), event.get('name'), event.get('cat'))

    def _build_pair_event(self, begin: RawEvent, end: RawEvent, min_timestamp: float, index: int) -> ProcessedEvent:
        """Build the processed event spanning a matched begin/end pair."""
        begin_args = begin.get('args')
        end_args = end.get('args')

        # End-event fields win on key collisions
        if begin_args is None and end_args is None:
            args = None
        else:
            args = {**(begin_args or {}), **(end_args or {})}

        file_path = (self.args_extractor.extract_file_path(begin_args)
                     or self.args_extractor.extract_file_path(end_args))

        begin_ts = begin.get('ts', 0)
        return ProcessedEvent(
            id=f"event-{index}",
            name=begin.get('name', ''),
            category=begin.get('cat', ''),
            start_time=(begin_ts - min_timestamp) / 1000,
            duration=max(0, end.get('ts', 0) - begin_ts) / 1000,
            file_path=file_path,
            args=args,
        )

    @staticmethod
    def get_unique_file_paths(events: Iterable[ProcessedEvent]) -> Set[str]:
        """Return the set of file paths referenced by events."""
        return {e.file_path for e in events if e.file_path}
