"""
TSC Trace Analyzer - TypeScript Compilation Trace Analysis Tool
"""

__version__ = "0.1.0"

from .core.analyzer import TraceAnalyzer
from .core.exceptions import TraceAnalyzerError, ParseError
from .core.types import (
    ProcessedEvent,
    FileEvents,
    CodeLocation,
    CompilationMetrics,
    ReportData,
    TraceConfig,
)

__all__ = [
    "TraceAnalyzer",
    "TraceAnalyzerError",
    "ParseError",
    "ProcessedEvent",
    "FileEvents",
    "CodeLocation",
    "CompilationMetrics",
    "ReportData",
    "TraceConfig",
]
