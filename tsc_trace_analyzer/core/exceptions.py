"""
Exceptions raised by the trace analysis pipeline.
"""

from typing import Optional


class TraceAnalyzerError(Exception):
    """Base class for trace analyzer errors."""


class ParseError(TraceAnalyzerError):
    """
    The trace source could not be decoded.

    Raised when the byte stream is not well-formed JSON, when its top-level
    value is not an array, or when the source cannot be read. The underlying
    exception is chained and also kept on ``cause``.
    """

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.cause = cause
