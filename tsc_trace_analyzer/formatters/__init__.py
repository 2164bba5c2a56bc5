"""Formatting helpers for human-readable output."""

from .time_formatter import (
    format_duration,
    format_bytes,
    format_percentage,
    format_event_count,
    format_kind_name,
)
from .summary_formatter import generate_metrics_summary, format_phase_row, create_bar

__all__ = [
    "format_duration",
    "format_bytes",
    "format_percentage",
    "format_event_count",
    "format_kind_name",
    "generate_metrics_summary",
    "format_phase_row",
    "create_bar",
]
