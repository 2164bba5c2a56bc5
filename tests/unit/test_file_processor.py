"""
Unit tests for tsc_trace_analyzer.processors.file_processor module.
"""
import io
import json
import pytest
from tsc_trace_analyzer.core.exceptions import ParseError, TraceAnalyzerError
from tsc_trace_analyzer.processors.file_processor import TraceFileProcessor


def as_stream(events):
    data = json.dumps(events).encode("utf-8")
    return io.BytesIO(data), len(data)


class TestParseStream:
    """Tests for TraceFileProcessor.parse_stream()."""

    def test_parses_events_in_order(self, raw_event):
        """Test that every object in the array is returned in file order."""
        events = [raw_event("X", ts, dur=1) for ts in (30, 10, 20)]
        source, size = as_stream(events)

        result = TraceFileProcessor.parse_stream(source, size)

        assert [e["ts"] for e in result] == [30, 10, 20]
        assert result[0]["ph"] == "X"

    def test_numbers_are_plain_floats_or_ints(self, raw_event):
        """Test that decimals are decoded as float, not Decimal."""
        source, size = as_stream([raw_event("X", 12.5, dur=3.25)])
        result = TraceFileProcessor.parse_stream(source, size)
        assert isinstance(result[0]["ts"], float)
        assert result[0]["dur"] == 3.25

    def test_empty_array(self):
        """Test that an empty array gives no events."""
        source, size = as_stream([])
        assert TraceFileProcessor.parse_stream(source, size) == []

    def test_non_object_entries_skipped(self, raw_event):
        """Test that array entries which are not objects are ignored."""
        source, size = as_stream([1, "text", raw_event("X", 0), None, [1, 2]])
        result = TraceFileProcessor.parse_stream(source, size)
        assert len(result) == 1

    def test_malformed_json_raises_parse_error(self):
        """Test that truncated JSON fails with ParseError."""
        data = b'[{"ph": "X", "ts": 1}, {"ph": '
        with pytest.raises(ParseError) as exc_info:
            TraceFileProcessor.parse_stream(io.BytesIO(data), len(data))
        assert exc_info.value.cause is not None
        assert exc_info.value.__cause__ is exc_info.value.cause

    def test_non_array_top_level_raises(self):
        """Test that a JSON object at the top level is rejected."""
        data = b'{"traceEvents": []}'
        with pytest.raises(ParseError, match="array"):
            TraceFileProcessor.parse_stream(io.BytesIO(data), len(data))

    def test_parse_error_is_analyzer_error(self):
        """Test the exception hierarchy."""
        data = b'not json'
        with pytest.raises(TraceAnalyzerError):
            TraceFileProcessor.parse_stream(io.BytesIO(data), len(data))


class TestProgress:
    """Tests for progress reporting."""

    def test_progress_monotonic_and_completes_once(self, raw_event):
        """Test that percentages never decrease and 100 is reported exactly once."""
        events = [raw_event("X", i, dur=1, args={"path": f"/src/file{i}.ts"}) for i in range(5000)]
        source, size = as_stream(events)
        reports = []

        result = TraceFileProcessor.parse_stream(source, size, reports.append)

        percentages = [r.percentage for r in reports]
        assert percentages == sorted(percentages)
        assert percentages.count(100) == 1
        assert percentages[-1] == 100
        assert len(set(percentages)) == len(percentages)
        assert reports[-1].events_count == len(result) == 5000
        assert reports[-1].bytes_read == reports[-1].total_bytes == size

    def test_progress_on_empty_array(self):
        """Test that an empty array still reports completion."""
        source, size = as_stream([])
        reports = []
        TraceFileProcessor.parse_stream(source, size, reports.append)
        assert reports[-1].percentage == 100
        assert reports[-1].events_count == 0
        assert all(r.percentage < 100 for r in reports[:-1])

    def test_no_completion_report_on_error(self):
        """Test that a failed parse never reports 100%."""
        data = b'[{"ph": "X"}, {'
        reports = []
        with pytest.raises(ParseError):
            TraceFileProcessor.parse_stream(io.BytesIO(data), len(data), reports.append)
        assert all(r.percentage < 100 for r in reports)


class TestIterStream:
    """Tests for lazy decoding."""

    def test_iter_stream_is_lazy(self, raw_event):
        """Test that the generator yields events before the whole input is read."""
        events = [raw_event("X", i, dur=1, args={"path": "/x" * 50}) for i in range(20000)]
        source, size = as_stream(events)
        consumed = []

        iterator = TraceFileProcessor.iter_stream(source, consumed.append)
        first = next(iterator)

        assert first["ts"] == 0
        assert consumed[-1] < size
        iterator.close()

    def test_stream_events_restartable(self, write_trace, raw_event):
        """Test that each call iterates the file from the start."""
        path = write_trace([raw_event("X", 1), raw_event("X", 2)])
        first_pass = list(TraceFileProcessor.stream_events(str(path)))
        second_pass = list(TraceFileProcessor.stream_events(str(path)))
        assert first_pass == second_pass
        assert len(first_pass) == 2


class TestParseFile:
    """Tests for file based parsing."""

    def test_parse_file(self, sample_trace_file, sample_raw_events):
        """Test reading a trace file from disk."""
        result = TraceFileProcessor.parse_file(str(sample_trace_file))
        assert result == sample_raw_events

    def test_missing_file_raises_parse_error(self, tmp_path):
        """Test that an unreadable path fails with ParseError."""
        with pytest.raises(ParseError) as exc_info:
            TraceFileProcessor.parse_file(str(tmp_path / "missing.json"))
        assert isinstance(exc_info.value.cause, OSError)

    def test_get_file_info(self, write_trace):
        """Test the size report."""
        path = write_trace(b"[]" + b" " * 2046)
        info = TraceFileProcessor.get_file_info(str(path))
        assert info == {"size": 2048, "size_formatted": "2 KB"}
