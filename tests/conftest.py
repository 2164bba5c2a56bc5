"""
Pytest configuration and shared fixtures for trace analyzer tests.
"""
import json
import pytest

from tsc_trace_analyzer.core.types import ProcessedEvent


def make_raw_event(ph, ts, name='checkSourceFile', cat='check', pid=1, tid=1, **extra):
    """Build a raw trace event the way tsc writes it."""
    event = {"pid": pid, "tid": tid, "ph": ph, "cat": cat, "ts": ts, "name": name}
    event.update(extra)
    return event


def make_event(start_time, duration, category='check', file_path=None, name='checkSourceFile', args=None, index=0):
    """Build a processed event directly."""
    return ProcessedEvent(
        id=f"event-{index}",
        name=name,
        category=category,
        start_time=start_time,
        duration=duration,
        file_path=file_path,
        args=args,
    )


@pytest.fixture
def raw_event():
    """Factory for raw trace events."""
    return make_raw_event


@pytest.fixture
def processed_event():
    """Factory for processed events."""
    return make_event


@pytest.fixture
def sample_raw_events():
    """Small but complete compilation trace."""
    return [
        {"pid": 1, "tid": 1, "ph": "M", "cat": "__metadata", "ts": 0, "name": "process_name",
         "args": {"name": "tsc"}},
        make_raw_event("X", 1000, name="createProgram", cat="program", dur=10000,
                       args={"configFilePath": "/proj/tsconfig.json"}),
        make_raw_event("X", 1100, name="createSourceFile", cat="parse", dur=2000,
                       args={"path": "/proj/src/app/main.ts"}),
        make_raw_event("X", 3200, name="createSourceFile", cat="parse", dur=500,
                       args={"path": "/proj/node_modules/lib/index.d.ts"}),
        make_raw_event("X", 3800, name="bindSourceFile", cat="bind", dur=300,
                       args={"path": "/proj/src/app/main.ts"}),
        make_raw_event("B", 4200, name="checkSourceFile", cat="check",
                       args={"path": "/proj/src/app/main.ts"}),
        make_raw_event("B", 4300, name="checkExpression", cat="check",
                       args={"kind": 213, "pos": 10, "end": 40, "path": "/proj/src/app/main.ts"}),
        make_raw_event("E", 4800, name="checkExpression", cat="check"),
        make_raw_event("B", 4900, name="checkExpression", cat="check",
                       args={"kind": 213, "pos": 10, "end": 40, "path": "/proj/src/app/main.ts"}),
        make_raw_event("E", 5100, name="checkExpression", cat="check"),
        make_raw_event("E", 7200, name="checkSourceFile", cat="check"),
        make_raw_event("X", 7300, name="emitFileSet", cat="emit", dur=1000,
                       args={"path": "/proj/src/app/main.ts"}),
    ]


@pytest.fixture
def write_trace(tmp_path):
    """Write events (or raw text) to a trace.json file and return its path."""
    def _write(content, name="trace.json"):
        path = tmp_path / name
        if isinstance(content, (bytes, bytearray)):
            path.write_bytes(content)
        elif isinstance(content, str):
            path.write_text(content, encoding="utf-8")
        else:
            path.write_text(json.dumps(content), encoding="utf-8")
        return path
    return _write


@pytest.fixture
def sample_trace_file(write_trace, sample_raw_events):
    """Temporary trace.json holding the sample compilation."""
    return write_trace(sample_raw_events)


@pytest.fixture
def project_dir(tmp_path):
    """Temporary project with one source file."""
    root = tmp_path / "project"
    src = root / "src" / "app"
    src.mkdir(parents=True)
    (src / "main.ts").write_text(
        "const a = 1;\n"
        "function slow(x: number) {\n"
        "  return compute(x, a);\n"
        "}\n",
        encoding="utf-8",
    )
    return root
