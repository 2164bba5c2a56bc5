"""Selection and statistics algorithms."""

from .selection import (
    get_top_n,
    quickselect,
    calculate_percentiles,
    mean,
    standard_deviation,
)

__all__ = ["get_top_n", "quickselect", "calculate_percentiles", "mean", "standard_deviation"]
