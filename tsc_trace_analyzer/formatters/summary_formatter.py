"""
Plain-text summary of compilation metrics.
"""

from typing import Dict, List, Optional

from ..core.types import CompilationMetrics, PhaseTiming
from .time_formatter import format_duration

SUMMARY_TOP_FILES = 10


def create_bar(ratio: float, width: int) -> str:
    """Render a ratio in [0, 1] as a fixed-width text bar."""
    ratio = max(0.0, min(1.0, ratio))
    filled = round(ratio * width)
    return '█' * filled + '░' * (width - filled)


def format_phase_row(name: str, phase: PhaseTiming, total: float, bar_width: int = 0) -> str:
    """
    Format one phase line of the summary.

    Args:
        name: Display name of the phase
        phase: Timing statistics of the phase
        total: Sum of all phase times, for the percentage
        bar_width: Width of an optional text bar (0 disables it)

    Returns:
        Formatted row, e.g. "  Check   :   120.00ms (60.0%) - 1,234 events"
    """
    ratio = phase.total_time / total if total > 0 else 0.0
    bar = f"{create_bar(ratio, bar_width)} " if bar_width else ""
    return (
        f"  {name:<8}: {bar}{format_duration(phase.total_time):>10} "
        f"({ratio * 100:.1f}%) - {phase.count:,} events"
    )


def generate_metrics_summary(
    metrics: CompilationMetrics,
    top: int = SUMMARY_TOP_FILES,
    percentiles: Optional[Dict[float, float]] = None
) -> str:
    """
    Generate a text summary of compilation metrics.

    Args:
        metrics: Metrics from MetricsCalculator.calculate_metrics()
        top: Number of slowest files to list
        percentiles: Optional event-duration percentiles to include

    Returns:
        Multi-line summary string
    """
    lines: List[str] = []

    lines.append('=== TypeScript Compilation Summary ===')
    lines.append('')

    lines.append(f"Total Duration: {format_duration(metrics.total_duration)}")
    lines.append(f"Files Processed: {metrics.total_files:,}")
    lines.append(f"Total Events: {metrics.total_events:,}")
    lines.append('')

    lines.append('Phase Breakdown:')
    phases = metrics.phases
    total_phase_time = phases.total_time
    lines.append(format_phase_row('Parse', phases.parse, total_phase_time))
    lines.append(format_phase_row('Bind', phases.bind, total_phase_time))
    lines.append(format_phase_row('Check', phases.check, total_phase_time))
    lines.append(format_phase_row('Emit', phases.emit, total_phase_time))
    lines.append('')

    if percentiles:
        lines.append('Event Durations:')
        lines.append('  ' + '  '.join(
            f"p{p:g}: {format_duration(value)}" for p, value in percentiles.items()
        ))
        lines.append('')

    slowest = metrics.hotspots.slowest_files[:top]
    lines.append(f"Top {len(slowest)} Slowest Files:")
    for i, item in enumerate(slowest, 1):
        lines.append(f"  {i}. {item.short_path} - {format_duration(item.duration)}")

    if metrics.hotspots.slowest_check_files:
        lines.append('')
        lines.append('Slowest Type Checking:')
        for i, item in enumerate(metrics.hotspots.slowest_check_files[:5], 1):
            lines.append(f"  {i}. {item.short_path} - {format_duration(item.duration)}")

    return '\n'.join(lines)
