"""
Type definitions for TypeScript trace analysis.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, TypedDict


# Chrome Trace Event phase markers
PHASE_BEGIN = 'B'
PHASE_END = 'E'
PHASE_COMPLETE = 'X'
PHASE_METADATA = 'M'
PHASE_INSTANT = 'I'

# Trace categories emitted by tsc --generateTrace
CATEGORY_PARSE = 'parse'
CATEGORY_BIND = 'bind'
CATEGORY_CHECK = 'check'
CATEGORY_CHECK_TYPES = 'checkTypes'
CATEGORY_EMIT = 'emit'
CATEGORY_PROGRAM = 'program'
CATEGORY_METADATA = '__metadata'

PHASES = ('parse', 'bind', 'check', 'emit')

# Category -> phase bucket; checkTypes is type-checking too
PHASE_MAP: Dict[str, str] = {
    CATEGORY_PARSE: 'parse',
    CATEGORY_BIND: 'bind',
    CATEGORY_CHECK: 'check',
    CATEGORY_CHECK_TYPES: 'check',
    CATEGORY_EMIT: 'emit',
}

PHASE_NAMES: Dict[str, str] = {
    CATEGORY_PARSE: 'Parse',
    CATEGORY_BIND: 'Bind',
    CATEGORY_CHECK: 'Check',
    CATEGORY_CHECK_TYPES: 'Type Check',
    CATEGORY_EMIT: 'Emit',
    CATEGORY_PROGRAM: 'Program',
    CATEGORY_METADATA: 'Metadata',
}


def get_phase(category: str) -> Optional[str]:
    """Return the phase bucket for a trace category, or None if it has none."""
    return PHASE_MAP.get(category)


class RawEvent(TypedDict, total=False):
    """One entry of the trace.json array, as decoded."""
    pid: int
    tid: int
    ph: str
    cat: str
    ts: float
    name: str
    dur: float
    args: Dict[str, Any]


@dataclass
class ProcessedEvent:
    """A reconstructed event with times in milliseconds from trace start."""
    id: str
    name: str
    category: str
    start_time: float
    duration: float
    file_path: Optional[str] = None
    args: Optional[Dict[str, Any]] = None

    @property
    def end_time(self) -> float:
        return self.start_time + self.duration

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        data = {
            'id': self.id,
            'name': self.name,
            'category': self.category,
            'startTime': self.start_time,
            'duration': self.duration,
        }
        if self.file_path is not None:
            data['filePath'] = self.file_path
        if self.args is not None:
            data['args'] = self.args
        return data


@dataclass
class FileEvents:
    """All processed events attributed to one source file."""
    file_path: str
    short_path: str
    events: List[ProcessedEvent]
    total_time: float
    parse_time: float
    bind_time: float
    check_time: float
    emit_time: float

    def phase_time(self, phase: str) -> float:
        """Return the accumulated time for one of the four phases."""
        return getattr(self, f'{phase}_time')

    def to_dict(self, include_events: bool = True) -> Dict[str, Any]:
        data = {
            'filePath': self.file_path,
            'shortPath': self.short_path,
            'totalTime': self.total_time,
            'parseTime': self.parse_time,
            'bindTime': self.bind_time,
            'checkTime': self.check_time,
            'emitTime': self.emit_time,
        }
        if include_events:
            data['events'] = [e.to_dict() for e in self.events]
        return data


@dataclass
class CodeLocation:
    """A slow AST node range within a file."""
    pos: int
    end: int
    kind: int
    kind_name: str
    duration: float
    event_name: str
    type_ids: Optional[List[int]] = None
    code_snippet: Optional[str] = None
    line_number: Optional[int] = None
    column_number: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        data = {
            'pos': self.pos,
            'end': self.end,
            'kind': self.kind,
            'kindName': self.kind_name,
            'duration': self.duration,
            'eventName': self.event_name,
        }
        optional = {
            'typeIds': self.type_ids,
            'codeSnippet': self.code_snippet,
            'lineNumber': self.line_number,
            'columnNumber': self.column_number,
        }
        data.update({k: v for k, v in optional.items() if v is not None})
        return data


@dataclass
class FileLocationDetails:
    """Slow code locations of one file."""
    file_path: str
    short_path: str
    total_time: float
    locations: List[CodeLocation]

    def to_dict(self) -> Dict[str, Any]:
        return {
            'filePath': self.file_path,
            'shortPath': self.short_path,
            'totalTime': self.total_time,
            'locations': [loc.to_dict() for loc in self.locations],
        }


@dataclass
class PhaseTiming:
    """Timing statistics for one compilation phase."""
    total_time: float = 0.0
    count: int = 0
    avg_time: float = 0.0
    max_time: float = 0.0
    min_time: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            'totalTime': self.total_time,
            'count': self.count,
            'avgTime': self.avg_time,
            'maxTime': self.max_time,
            'minTime': self.min_time,
        }


@dataclass
class PhaseInfo:
    """Per-phase timing statistics."""
    parse: PhaseTiming = field(default_factory=PhaseTiming)
    bind: PhaseTiming = field(default_factory=PhaseTiming)
    check: PhaseTiming = field(default_factory=PhaseTiming)
    emit: PhaseTiming = field(default_factory=PhaseTiming)

    @property
    def total_time(self) -> float:
        return sum(getattr(self, phase).total_time for phase in PHASES)

    def to_dict(self) -> Dict[str, Any]:
        return {phase: getattr(self, phase).to_dict() for phase in PHASES}


# eq=False keeps identity hashing so a timeline can key a WeakKeyDictionary
@dataclass(eq=False)
class TimelineData:
    """Timeline of a whole compilation."""
    total_duration: float
    start_time: float
    end_time: float
    phases: PhaseInfo
    files: List[FileEvents]
    events: List[ProcessedEvent]

    def to_dict(self) -> Dict[str, Any]:
        return {
            'totalDuration': self.total_duration,
            'startTime': self.start_time,
            'endTime': self.end_time,
            'phases': self.phases.to_dict(),
            'files': [f.to_dict(include_events=False) for f in self.files],
            'events': [e.to_dict() for e in self.events],
        }


@dataclass
class HotspotItem:
    file_path: str
    short_path: str
    duration: float
    category: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data = {
            'filePath': self.file_path,
            'shortPath': self.short_path,
            'duration': self.duration,
        }
        if self.category is not None:
            data['category'] = self.category
        return data


@dataclass
class Hotspots:
    slowest_files: List[HotspotItem] = field(default_factory=list)
    slowest_parse_files: List[HotspotItem] = field(default_factory=list)
    slowest_check_files: List[HotspotItem] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'slowestFiles': [h.to_dict() for h in self.slowest_files],
            'slowestParseFiles': [h.to_dict() for h in self.slowest_parse_files],
            'slowestCheckFiles': [h.to_dict() for h in self.slowest_check_files],
        }


@dataclass
class CompilationMetrics:
    """Summary metrics of a compilation."""
    total_files: int
    total_duration: float
    total_events: int
    phases: PhaseInfo
    hotspots: Hotspots

    def to_dict(self) -> Dict[str, Any]:
        return {
            'totalFiles': self.total_files,
            'totalDuration': self.total_duration,
            'totalEvents': self.total_events,
            'phases': self.phases.to_dict(),
            'hotspots': self.hotspots.to_dict(),
        }


@dataclass
class ParseProgress:
    """Progress of a streaming trace parse."""
    bytes_read: int
    total_bytes: int
    events_count: int
    percentage: int


@dataclass
class ReportMetadata:
    generated_at: str
    trace_file: str
    version: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            'generatedAt': self.generated_at,
            'traceFile': self.trace_file,
            'version': self.version,
        }


@dataclass
class ReportData:
    """Everything the report renderer needs."""
    metadata: ReportMetadata
    timeline: TimelineData
    metrics: CompilationMetrics

    def to_dict(self) -> Dict[str, Any]:
        return {
            'metadata': self.metadata.to_dict(),
            'timeline': self.timeline.to_dict(),
            'metrics': self.metrics.to_dict(),
        }


DEFAULT_PERCENTILES = (50, 90, 95, 99)


class TraceConfig:
    """Configuration for trace analysis."""

    def __init__(
        self,
        min_duration_ms: float = 0.0,
        top_files: int = 20,
        top_phase_files: int = 10,
        location_threshold_ms: float = 0.1,
        percentiles: Sequence[float] = DEFAULT_PERCENTILES,
        project_root: Optional[str] = None,
        snippet_length: int = 200
    ):
        """
        Initialize trace analysis configuration.

        Args:
            min_duration_ms: Events shorter than this (in ms) are dropped after
                             reconstruction. The threshold is inclusive: an event
                             lasting exactly min_duration_ms is kept.
                             Default: 0.0 (keep everything)

            top_files: Number of files reported in the overall hotspot list.
                       Default: 20

            top_phase_files: Number of files reported in the per-phase (parse,
                             check) hotspot lists. Default: 10

            location_threshold_ms: Aggregated code locations at or below this
                                   duration are treated as noise and dropped.
                                   Default: 0.1

            percentiles: Percentiles computed over event durations.
                         Default: (50, 90, 95, 99)

            project_root: Root of the compiled project. When set, code snippets
                          are read from source files for events carrying
                          pos/end information. Default: None (no snippets)

            snippet_length: Maximum length of an extracted code snippet.
                            Default: 200

        Raises:
            ValueError: If a threshold is negative, a list size is negative,
                        or a percentile lies outside [0, 100]
        """
        if min_duration_ms < 0:
            raise ValueError(f"min_duration_ms must be >= 0, got {min_duration_ms}")
        if location_threshold_ms < 0:
            raise ValueError(f"location_threshold_ms must be >= 0, got {location_threshold_ms}")
        if top_files < 0 or top_phase_files < 0:
            raise ValueError("top_files and top_phase_files must be >= 0")
        if snippet_length <= 0:
            raise ValueError(f"snippet_length must be > 0, got {snippet_length}")
        for p in percentiles:
            if not 0 <= p <= 100:
                raise ValueError(f"Invalid percentile {p}. Must be within [0, 100]")

        self.min_duration_ms = min_duration_ms
        self.top_files = top_files
        self.top_phase_files = top_phase_files
        self.location_threshold_ms = location_threshold_ms
        self.percentiles = tuple(percentiles)
        self.project_root = project_root
        self.snippet_length = snippet_length
