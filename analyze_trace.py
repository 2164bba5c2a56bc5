#!/usr/bin/env python3
"""
TypeScript Trace Analyzer - command line entry point
"""

import json
import logging
import sys
from pathlib import Path

from tsc_trace_analyzer import TraceAnalyzer, TraceAnalyzerError
from tsc_trace_analyzer.formatters import format_bytes, generate_metrics_summary
from tsc_trace_analyzer.processors import TraceFileProcessor
from tsc_trace_analyzer.report import prepare_results

TRACE_FILE_NAME = 'trace.json'


def resolve_trace_path(input_path: str) -> Path:
    """Accept either a trace file or a --generateTrace output directory."""
    path = Path(input_path)
    if path.is_dir():
        path = path / TRACE_FILE_NAME
    if not path.is_file():
        raise FileNotFoundError(str(path))
    return path


def main():
    import argparse
    parser = argparse.ArgumentParser(
        description='Analyze trace files produced by tsc --generateTrace.',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python analyze_trace.py trace-out/
  python analyze_trace.py trace-out/trace.json --min-duration 0.5
  python analyze_trace.py trace-out/ --project . --json report.json
        """
    )
    parser.add_argument('input_path', help='Path to trace.json or the directory containing it')
    parser.add_argument('--min-duration', type=float, default=0.0,
                        help='Ignore events shorter than this many milliseconds')
    parser.add_argument('--top', type=int, default=10, help='Number of slowest files to list')
    parser.add_argument('--project', dest='project_root', default=None,
                        help='Project root, enables code snippets for slow locations')
    parser.add_argument('--snippet-length', type=int, default=200, help='Maximum code snippet length')
    parser.add_argument('--json', dest='json_output', default=None,
                        help='Write the full analysis as JSON to this file')
    parser.add_argument('-v', '--verbose', action='store_true', help='Enable progress logging')
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    try:
        trace_path = resolve_trace_path(args.input_path)
        analyzer = TraceAnalyzer(
            min_duration_ms=args.min_duration,
            top_files=max(args.top, 20),
            project_root=args.project_root,
            snippet_length=args.snippet_length
        )

        file_info = TraceFileProcessor.get_file_info(str(trace_path))
        print(f"\nConfiguration:")
        print(f"  Trace file: {trace_path} ({file_info['size_formatted']})")
        print(f"  Min duration: {args.min_duration}ms")
        print(f"  Project root: {args.project_root or '-'}\n")

        last_reported = [-1]

        def on_progress(progress):
            if progress.percentage // 10 > last_reported[0]:
                last_reported[0] = progress.percentage // 10
                print(f"  Parsing... {progress.percentage}% "
                      f"({format_bytes(progress.bytes_read)}, {progress.events_count:,} events)",
                      file=sys.stderr)

        analyzer.process_trace_file(str(trace_path), on_progress)

        print()
        print(generate_metrics_summary(analyzer.metrics, top=args.top, percentiles=analyzer.percentiles))

        if args.json_output:
            with open(args.json_output, 'w', encoding='utf-8') as f:
                json.dump(prepare_results(analyzer), f, indent=2)
            print(f"\nJSON report written to {args.json_output}")

        print(f"\n✓ Analysis complete!")
    except FileNotFoundError as e:
        print(f"Error: File '{e}' not found.")
        sys.exit(1)
    except (TraceAnalyzerError, ValueError) as e:
        print(f"Error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
