"""
Trace JSON file processing using streaming parser.
"""

import logging
import os
from typing import BinaryIO, Callable, Dict, Iterator, List, Optional

import ijson

from ..core.exceptions import ParseError
from ..core.types import ParseProgress, RawEvent
from ..formatters import format_bytes

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[ParseProgress], None]

LOG_EVERY_EVENTS = 100_000


class _ProgressReporter:
    """Turns byte counts into at most one callback per percentage point."""

    def __init__(self, total_bytes: int, callback: ProgressCallback):
        self.total_bytes = total_bytes
        self.callback = callback
        self.events_count = 0
        self._last_percentage = 0

    def on_read(self, bytes_read: int) -> None:
        if self.total_bytes <= 0:
            return
        # 100 is reserved for end of stream
        percentage = min(99, bytes_read * 100 // self.total_bytes)
        if percentage > self._last_percentage:
            self._last_percentage = percentage
            self.callback(ParseProgress(
                bytes_read=bytes_read,
                total_bytes=self.total_bytes,
                events_count=self.events_count,
                percentage=percentage,
            ))

    def finish(self) -> None:
        self.callback(ParseProgress(
            bytes_read=self.total_bytes,
            total_bytes=self.total_bytes,
            events_count=self.events_count,
            percentage=100,
        ))


class _CountingReader:
    """File-like wrapper that reports how many bytes the parser consumed."""

    def __init__(self, source: BinaryIO, on_read: Callable[[int], None]):
        self._source = source
        self._on_read = on_read
        self.bytes_read = 0

    def read(self, size: int = -1) -> bytes:
        chunk = self._source.read(size)
        if chunk:
            self.bytes_read += len(chunk)
            self._on_read(self.bytes_read)
        return chunk


def _replay(first, events):
    yield first
    yield from events


class TraceFileProcessor:
    """Processes tsc trace.json files using streaming parser."""

    @staticmethod
    def iter_stream(source: BinaryIO, on_read: Optional[Callable[[int], None]] = None) -> Iterator[RawEvent]:
        """
        Lazily decode the raw events of a trace JSON array.

        Only the parser's read buffer is held in memory; events are yielded
        one at a time as their closing brace is read. Entries that are not
        JSON objects are skipped.

        Args:
            source: Binary file-like object positioned at the start of the JSON
            on_read: Optional callback(total_bytes_consumed) after each read

        Yields:
            Raw event dictionaries in file order

        Raises:
            ParseError: If the JSON is malformed, the top-level value is not an
                        array, or the source cannot be read
        """
        reader = _CountingReader(source, on_read) if on_read else source

        try:
            events = ijson.parse(reader, use_float=True)
            first = next(events, None)
            if first is None:
                raise ParseError("Trace source is empty")
            if first[1] != 'start_array':
                raise ParseError(f"Top-level JSON value must be an array, found '{first[1]}'")

            skipped = 0
            for item in ijson.items(_replay(first, events), 'item'):
                if not isinstance(item, dict):
                    skipped += 1
                    continue
                yield item

            if skipped:
                logger.debug("Skipped %d non-object trace entries", skipped)
        except (ijson.JSONError, UnicodeDecodeError) as e:
            raise ParseError(f"Failed to parse trace file: {e}", e) from e
        except OSError as e:
            raise ParseError(f"Failed to read trace file: {e}", e) from e

    @staticmethod
    def parse_stream(
        source: BinaryIO,
        total_bytes: int,
        progress_callback: Optional[ProgressCallback] = None
    ) -> List[RawEvent]:
        """
        Decode every raw event of a trace JSON array.

        Args:
            source: Binary file-like object holding the JSON array
            total_bytes: Total size of the source, used for progress percentages
            progress_callback: Optional callback receiving ParseProgress. Called at
                               most once per percentage point; the 100% report
                               is sent exactly once, after the last event.

        Returns:
            List of raw events in file order

        Raises:
            ParseError: If the source cannot be decoded (no partial result)
        """
        reporter = _ProgressReporter(total_bytes, progress_callback) if progress_callback else None
        on_read = reporter.on_read if reporter else None

        events: List[RawEvent] = []
        for event in TraceFileProcessor.iter_stream(source, on_read):
            events.append(event)
            if reporter:
                reporter.events_count += 1
            if len(events) % LOG_EVERY_EVENTS == 0:
                logger.debug("  Read %d events...", len(events))

        if reporter:
            reporter.finish()

        return events

    @staticmethod
    def parse_file(file_path: str, progress_callback: Optional[ProgressCallback] = None) -> List[RawEvent]:
        """
        Decode a trace.json file.

        Args:
            file_path: Path to the trace JSON file
            progress_callback: Optional progress callback (see parse_stream)

        Returns:
            List of raw events

        Raises:
            ParseError: If the file cannot be read or decoded
        """
        logger.info("Processing %s...", file_path)

        try:
            total_bytes = os.path.getsize(file_path)
            f = open(file_path, 'rb')
        except OSError as e:
            raise ParseError(f"Failed to read trace file: {e}", e) from e

        with f:
            events = TraceFileProcessor.parse_stream(f, total_bytes, progress_callback)

        logger.info("Completed reading file: %d events (%s).", len(events), format_bytes(total_bytes))
        return events

    @staticmethod
    def stream_events(file_path: str) -> Iterator[RawEvent]:
        """
        Yield the raw events of a trace.json file one by one.

        Each call reopens the file, so iteration can be restarted by calling
        again. Closing the generator early closes the file.

        Args:
            file_path: Path to the trace JSON file

        Yields:
            Raw event dictionaries
        """
        try:
            f = open(file_path, 'rb')
        except OSError as e:
            raise ParseError(f"Failed to read trace file: {e}", e) from e

        with f:
            yield from TraceFileProcessor.iter_stream(f)

    @staticmethod
    def get_file_info(file_path: str) -> Dict:
        """Return the size of a trace file without parsing it."""
        size = os.path.getsize(file_path)
        return {'size': size, 'size_formatted': format_bytes(size)}
