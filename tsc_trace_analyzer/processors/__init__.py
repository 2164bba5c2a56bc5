"""Processors for trace data transformation and analysis."""

from .file_processor import TraceFileProcessor
from .event_processor import EventProcessor
from .file_aggregator import FileAggregator, shorten_path
from .location_aggregator import LocationAggregator, get_syntax_kind_name
from .timeline_builder import TimelineBuilder
from .metrics_calculator import MetricsCalculator

__all__ = [
    "TraceFileProcessor",
    "EventProcessor",
    "FileAggregator",
    "shorten_path",
    "LocationAggregator",
    "get_syntax_kind_name",
    "TimelineBuilder",
    "MetricsCalculator",
]
