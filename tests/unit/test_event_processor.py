"""
Unit tests for tsc_trace_analyzer.processors.event_processor module.
"""
import pytest
from tsc_trace_analyzer.processors.event_processor import EventProcessor, insert_sorted


@pytest.fixture
def processor():
    return EventProcessor()


class TestCompleteEvents:
    """Tests for X (complete) events."""

    def test_complete_event_converted_to_ms(self, processor, raw_event):
        """Test that ts and dur are converted from microseconds."""
        events = processor.process_events([
            raw_event("X", 5000, cat="parse", dur=1500, args={"path": "/a.ts"}),
            raw_event("X", 7000, cat="parse", dur=250, args={"path": "/b.ts"}),
        ])

        assert len(events) == 2
        assert events[0].start_time == 0
        assert events[0].duration == 1.5
        assert events[1].start_time == 2.0
        assert events[1].duration == 0.25

    def test_missing_dur_defaults_to_zero(self, processor, raw_event):
        """Test a complete event without dur."""
        events = processor.process_events([raw_event("X", 100)])
        assert events[0].duration == 0

    def test_file_path_and_args_copied(self, processor, raw_event):
        """Test that args are copied and the file path resolved."""
        args = {"fileName": "/src/a.ts", "pos": 3, "end": 9}
        events = processor.process_events([raw_event("X", 0, dur=10, args=args)])

        assert events[0].file_path == "/src/a.ts"
        assert events[0].args == args
        assert events[0].args is not args

    def test_ids_assigned(self, processor, raw_event):
        """Test that ids follow output order."""
        events = processor.process_events([raw_event("X", 0, dur=1), raw_event("X", 10, dur=1)])
        assert [e.id for e in events] == ["event-0", "event-1"]


class TestBeginEndPairing:
    """Tests for B/E reconstruction."""

    def test_single_pair(self, processor, raw_event):
        """Test that a begin/end pair becomes one event."""
        events = processor.process_events([
            raw_event("B", 1000, args={"path": "/src/a.ts"}),
            raw_event("E", 1500),
        ])

        assert len(events) == 1
        assert events[0].category == "check"
        assert events[0].start_time == 0
        assert events[0].duration == 0.5
        assert events[0].file_path == "/src/a.ts"

    def test_same_key_nesting_is_lifo(self, processor, raw_event):
        """Test that the first end closes the innermost begin."""
        events = processor.process_events([
            raw_event("B", 0, name="checkExpression", args={"pos": 1, "end": 100}),
            raw_event("B", 10, name="checkExpression", args={"pos": 20, "end": 30}),
            raw_event("E", 40, name="checkExpression"),
            raw_event("E", 100, name="checkExpression"),
        ])

        assert len(events) == 2
        outer, inner = events
        assert outer.start_time == 0
        assert outer.duration == 0.1
        assert outer.args["pos"] == 1
        assert inner.start_time == 0.01
        assert inner.duration == pytest.approx(0.03)
        assert inner.args["pos"] == 20

    def test_different_threads_do_not_pair(self, processor, raw_event):
        """Test that pairing keys include pid and tid."""
        events = processor.process_events([
            raw_event("B", 0, tid=1),
            raw_event("E", 100, tid=2),
        ])
        assert events == []

    def test_unmatched_end_dropped(self, processor, raw_event):
        """Test that an end without a begin yields nothing."""
        events = processor.process_events([
            raw_event("E", 100),
            raw_event("X", 200, dur=10),
        ])
        assert len(events) == 1
        assert events[0].start_time == 0.1

    def test_unmatched_begin_dropped(self, processor, raw_event):
        """Test that a begin never closed produces no event."""
        events = processor.process_events([raw_event("B", 0), raw_event("X", 10, dur=5)])
        assert len(events) == 1

    def test_end_args_override_begin_args(self, processor, raw_event):
        """Test args merging on key collisions."""
        events = processor.process_events([
            raw_event("B", 0, args={"path": "/a.ts", "results": "begin"}),
            raw_event("E", 10, args={"results": "end", "extra": 1}),
        ])
        assert events[0].args == {"path": "/a.ts", "results": "end", "extra": 1}

    def test_file_path_falls_back_to_end_event(self, processor, raw_event):
        """Test that the end event's path is used when the begin has none."""
        events = processor.process_events([
            raw_event("B", 0),
            raw_event("E", 10, args={"fileName": "/b.ts"}),
        ])
        assert events[0].file_path == "/b.ts"

    def test_pair_without_args(self, processor, raw_event):
        """Test that a pair with no args on either side keeps args None."""
        events = processor.process_events([raw_event("B", 0), raw_event("E", 10)])
        assert events[0].args is None
        assert events[0].file_path is None


class TestOrderingAndFiltering:
    """Tests for normalization and ordering."""

    def test_metadata_events_dropped(self, processor, raw_event):
        """Test that M events are ignored and do not set the time origin."""
        events = processor.process_events([
            raw_event("M", 0, cat="__metadata", name="process_name"),
            raw_event("X", 1000, dur=10),
        ])
        assert len(events) == 1
        assert events[0].start_time == 0

    def test_instant_events_ignored(self, processor, raw_event):
        """Test that I events produce no output."""
        events = processor.process_events([raw_event("I", 0), raw_event("X", 10, dur=1)])
        assert len(events) == 1

    def test_unsorted_input_is_sorted(self, processor, raw_event):
        """Test that start times are non-decreasing regardless of input order."""
        events = processor.process_events([
            raw_event("X", 3000, dur=1),
            raw_event("B", 1000, name="outer"),
            raw_event("X", 2000, dur=1),
            raw_event("E", 5000, name="outer"),
            raw_event("X", 500, dur=1),
        ])
        starts = [e.start_time for e in events]
        assert starts == sorted(starts)
        assert all(e.start_time >= 0 and e.duration >= 0 for e in events)

    def test_pair_inserted_at_begin_time(self, processor, raw_event):
        """Test that a long pair closing late is placed at its begin time."""
        events = processor.process_events([
            raw_event("B", 0, name="checkSourceFile"),
            raw_event("X", 100, name="checkExpression", dur=10),
            raw_event("E", 1000, name="checkSourceFile"),
        ])
        assert [e.name for e in events] == ["checkSourceFile", "checkExpression"]

    def test_empty_input(self, processor):
        """Test that empty input gives an empty list."""
        assert processor.process_events([]) == []

    def test_only_metadata(self, processor, raw_event):
        """Test input holding only metadata events."""
        assert processor.process_events([raw_event("M", 0)]) == []


class TestInsertSorted:
    """Tests for insert_sorted()."""

    def test_insert_keeps_order(self, processed_event):
        """Test insertion into the middle and at the end."""
        events = [processed_event(0, 1), processed_event(5, 1)]
        insert_sorted(events, processed_event(3, 1, name="middle"))
        insert_sorted(events, processed_event(9, 1, name="last"))
        assert [e.start_time for e in events] == [0, 3, 5, 9]

    def test_equal_start_times_keep_arrival_order(self, processed_event):
        """Test that equal keys insert after existing ones."""
        events = [processed_event(0, 1, name="a"), processed_event(5, 1, name="b")]
        insert_sorted(events, processed_event(0, 1, name="c"))
        assert [e.name for e in events] == ["a", "c", "b"]


class TestUniqueFilePaths:
    """Tests for get_unique_file_paths()."""

    def test_collects_distinct_paths(self, processed_event):
        """Test that None paths are skipped and duplicates collapse."""
        events = [
            processed_event(0, 1, file_path="/a.ts"),
            processed_event(1, 1, file_path="/a.ts"),
            processed_event(2, 1, file_path="/b.ts"),
            processed_event(3, 1),
        ]
        assert EventProcessor.get_unique_file_paths(events) == {"/a.ts", "/b.ts"}
