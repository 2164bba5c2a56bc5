"""Report output helpers."""

from .result_builder import prepare_results

__all__ = ["prepare_results"]
