"""Core components for trace analysis."""

from .analyzer import TraceAnalyzer
from .exceptions import TraceAnalyzerError, ParseError
from .types import TraceConfig

__all__ = ["TraceAnalyzer", "TraceAnalyzerError", "ParseError", "TraceConfig"]
