"""
Result builder for report output.
"""

from typing import Any, Dict

from ..formatters import format_duration

SLOW_LOCATIONS_PER_FILE = 10


def prepare_results(analyzer, include_events: bool = True) -> Dict[str, Any]:
    """
    Convert analyzer results to a plain structure for JSON output.

    Every value is a dict, list, string or number, so the result can be
    passed straight to json.dump() or handed to the report renderer.

    Args:
        analyzer: TraceAnalyzer instance with completed analysis
        include_events: If False, the (potentially huge) event list is left out
                        of the timeline section

    Returns:
        Dictionary with 'metadata', 'timeline', 'metrics', 'percentiles',
        'phaseBreakdown' and 'slowLocations' sections

    Raises:
        ValueError: If the analyzer has not processed a trace yet
    """
    if analyzer.report is None:
        raise ValueError("No analysis results. Call process_trace_file() first.")

    results = analyzer.report.to_dict()
    if not include_events:
        results['timeline']['events'] = []

    # Formatted durations for the hotspot tables
    for section in ('slowestFiles', 'slowestParseFiles', 'slowestCheckFiles'):
        for item in results['metrics']['hotspots'][section]:
            item['durationFormatted'] = format_duration(item['duration'])

    results['metadata']['rawEventCount'] = analyzer.raw_event_count
    results['metadata']['totalDurationFormatted'] = format_duration(analyzer.timeline.total_duration)

    # JSON object keys must be strings
    results['percentiles'] = {
        f"p{p:g}": value for p, value in analyzer.percentiles.items()
    }

    summary = analyzer.timeline_builder.get_timeline_summary(analyzer.timeline)
    results['phaseBreakdown'] = summary['phase_breakdown']

    results['slowLocations'] = [
        details.to_dict()
        for details in analyzer.get_slowest_locations(SLOW_LOCATIONS_PER_FILE)
    ]

    return results
