"""
Main trace analyzer orchestrator.
"""

import logging
from datetime import datetime, timezone
from typing import Dict, Iterable, List, Optional, Sequence

from .. import __version__
from ..core.types import (
    DEFAULT_PERCENTILES,
    CompilationMetrics,
    CodeLocation,
    FileLocationDetails,
    ProcessedEvent,
    RawEvent,
    ReportData,
    ReportMetadata,
    TimelineData,
    TraceConfig,
)
from ..extractors import ArgsExtractor, SnippetExtractor
from ..filters import EventFilter
from ..formatters import format_duration
from ..processors import (
    TraceFileProcessor,
    EventProcessor,
    FileAggregator,
    LocationAggregator,
    TimelineBuilder,
    MetricsCalculator,
)
from ..processors.file_processor import ProgressCallback

logger = logging.getLogger(__name__)


class TraceAnalyzer:
    """Main orchestrator for TypeScript trace analysis."""

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
        Initialize the TraceAnalyzer.

        Args:
            min_duration_ms: Drop events shorter than this (inclusive floor)
            top_files: Size of the slowest-files hotspot list
            top_phase_files: Size of the per-phase hotspot lists
            location_threshold_ms: Noise floor for slow code locations
            percentiles: Event-duration percentiles to compute
            project_root: Project root for code snippet extraction (optional)
            snippet_length: Maximum code snippet length
        """
        # Configuration
        self.config = TraceConfig(
            min_duration_ms=min_duration_ms,
            top_files=top_files,
            top_phase_files=top_phase_files,
            location_threshold_ms=location_threshold_ms,
            percentiles=percentiles,
            project_root=project_root,
            snippet_length=snippet_length
        )

        # Results of the last run
        self.trace_file: Optional[str] = None
        self.raw_event_count = 0
        self.events: List[ProcessedEvent] = []
        self.timeline: Optional[TimelineData] = None
        self.metrics: Optional[CompilationMetrics] = None
        self.percentiles: Dict[float, float] = {}
        self.report: Optional[ReportData] = None

        # Initialize components
        self.args_extractor = ArgsExtractor()
        self.snippet_extractor = (
            SnippetExtractor(project_root, snippet_length) if project_root else None
        )

        self.file_processor = TraceFileProcessor()
        self.event_processor = EventProcessor(self.args_extractor)
        self.event_filter = EventFilter(self.config)

        self.file_aggregator = FileAggregator()
        self.location_aggregator = LocationAggregator(self.config.location_threshold_ms)
        self.timeline_builder = TimelineBuilder(self.file_aggregator)
        self.metrics_calculator = MetricsCalculator(
            self.config.top_files,
            self.config.top_phase_files
        )

    def process_trace_file(self, file_path: str, progress_callback: Optional[ProgressCallback] = None) -> ReportData:
        """
        Decode a trace.json file and run the full analysis.

        Args:
            file_path: Path to the trace JSON file
            progress_callback: Optional callback receiving ParseProgress

        Returns:
            ReportData for the trace

        Raises:
            ParseError: If the file cannot be read or is not a JSON array
        """
        raw_events = self.file_processor.parse_file(file_path, progress_callback)
        return self.process_raw_events(raw_events, trace_file=file_path)

    def process_raw_events(self, raw_events: Iterable[RawEvent], trace_file: str = '<memory>') -> ReportData:
        """
        Run the analysis over already decoded raw events.

        Args:
            raw_events: Raw trace events
            trace_file: Name recorded in the report metadata

        Returns:
            ReportData for the events
        """
        raw_events = list(raw_events)
        self.trace_file = trace_file
        self.raw_event_count = len(raw_events)

        # Step 1: Match begin/end pairs and normalize times
        events = self.event_processor.process_events(raw_events)
        logger.info("Processed %d events from %d raw events", len(events), len(raw_events))

        # Step 2: Drop short events
        before = len(events)
        events = self.event_filter.apply(events)
        if len(events) != before:
            logger.info("Filtered to %d events (removed %d shorter than %sms)",
                        len(events), before - len(events), self.config.min_duration_ms)

        # Step 3: Attach code snippets
        if self.snippet_extractor:
            events = self.snippet_extractor.enrich_events(events)

        # Step 4: Aggregate
        self.events = events
        self.timeline = self.timeline_builder.build_timeline(events)
        self.metrics = self.metrics_calculator.calculate_metrics(self.timeline)
        self.percentiles = self.metrics_calculator.calculate_percentiles(events, self.config.percentiles)

        logger.info("Timeline built: %d files, %s total",
                    len(self.timeline.files), format_duration(self.timeline.total_duration))

        self.report = ReportData(
            metadata=ReportMetadata(
                generated_at=datetime.now(timezone.utc).isoformat(),
                trace_file=trace_file,
                version=__version__,
            ),
            timeline=self.timeline,
            metrics=self.metrics,
        )
        return self.report

    def get_file_location_details(self, file_path: str) -> Optional[FileLocationDetails]:
        """
        Slow code locations of one analyzed file.

        Args:
            file_path: Full file path as found in the trace

        Returns:
            FileLocationDetails, or None if the file is not in the timeline
        """
        if self.timeline is None:
            return None
        file_events = self.timeline_builder.get_file_timeline(self.timeline, file_path)
        if file_events is None:
            return None
        return self.location_aggregator.extract_locations_from_file(
            file_events.events, file_events.file_path, file_events.short_path
        )

    def get_slowest_locations(self, n: int = 10, max_files: Optional[int] = None) -> List[FileLocationDetails]:
        """
        Files with slow code locations, each limited to its n slowest locations.

        Args:
            n: Locations kept per file
            max_files: Number of slowest files inspected (default: top_files)

        Returns:
            FileLocationDetails of files having at least one slow location,
            ordered by their location time
        """
        if self.timeline is None:
            return []
        if max_files is None:
            max_files = self.config.top_files

        details = []
        for file_events in self.timeline.files[:max_files]:
            file_details = self.location_aggregator.extract_locations_from_file(
                file_events.events, file_events.file_path, file_events.short_path
            )
            if not file_details.locations:
                continue
            locations: List[CodeLocation] = file_details.locations[:n]
            details.append(FileLocationDetails(
                file_path=file_details.file_path,
                short_path=file_details.short_path,
                total_time=sum(loc.duration for loc in locations),
                locations=locations,
            ))

        details.sort(key=lambda d: d.total_time, reverse=True)
        return details
