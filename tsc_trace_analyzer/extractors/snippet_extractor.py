"""
Source code snippet extraction for slow code locations.

The checker reports AST node ranges as character offsets into the source
file. Given the project the trace was generated from, this module reads the
covered text back so a report can show the actual slow code.
"""

import bisect
import logging
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from ..core.types import ProcessedEvent
from .args_extractor import ArgsExtractor

logger = logging.getLogger(__name__)

# Per-file caches are released during batches spanning more files than this
BATCH_CACHE_FILE_LIMIT = 10


@dataclass
class ExtractedSnippet:
    """Code covered by a (pos, end) range."""
    code: str
    line_number: int
    column_number: int
    truncated: bool


class SnippetExtractor:
    """
    Extracts code snippets from source files using AST offsets.

    File contents and line offsets are cached, as are trace-path to
    filesystem-path resolutions.

    Args:
        project_root: Root directory of the compiled project
        max_snippet_length: Snippets longer than this are cut and get '...'
    """

    def __init__(self, project_root: str, max_snippet_length: int = 200):
        self.project_root = Path(project_root).resolve()
        self.max_snippet_length = max_snippet_length
        self._cache: Dict[str, Tuple[str, List[int]]] = {}
        self._path_mappings: Dict[str, Optional[Path]] = {}

    @staticmethod
    def _calculate_line_column(line_offsets: List[int], pos: int) -> Tuple[int, int]:
        """Return the 1-based (line, column) of an offset."""
        line = bisect.bisect_right(line_offsets, pos)
        return line, pos - line_offsets[line - 1] + 1

    def resolve_file_path(self, trace_path: str) -> Optional[Path]:
        """
        Resolve a path found in the trace to a file on disk.

        Tries, in order: the path as given, the path under the project root,
        trailing segments of the path under the project root, and the part
        starting at a '/src/' segment.

        Args:
            trace_path: File path as recorded in the trace

        Returns:
            Existing file path or None
        """
        if trace_path in self._path_mappings:
            return self._path_mappings[trace_path]

        resolved = self._find_file(trace_path)
        self._path_mappings[trace_path] = resolved
        if resolved is None:
            logger.debug("Could not resolve source file %s", trace_path)
        return resolved

    def _find_file(self, trace_path: str) -> Optional[Path]:
        direct = Path(trace_path)
        if direct.is_file():
            return direct

        relative = trace_path.lstrip('/\\')
        project_path = self.project_root / relative
        if project_path.is_file():
            return project_path

        parts = [p for p in trace_path.replace('\\', '/').split('/') if p]
        for i in range(len(parts) - 1, -1, -1):
            partial = self.project_root.joinpath(*parts[i:])
            if partial.is_file():
                return partial

        src_index = trace_path.find('/src/')
        if src_index != -1:
            src_path = self.project_root / trace_path[src_index + 1:]
            if src_path.is_file():
                return src_path

        return None

    def _load_file(self, file_path: str) -> Optional[Tuple[str, List[int]]]:
        if file_path in self._cache:
            return self._cache[file_path]

        resolved = self.resolve_file_path(file_path)
        if resolved is None:
            return None

        try:
            # newline='' keeps \r\n intact so offsets line up with the compiler's
            with open(resolved, 'r', encoding='utf-8', newline='') as f:
                content = f.read()
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("Failed to read source file %s: %s", resolved, e)
            return None

        line_offsets = [0]
        line_offsets.extend(i + 1 for i, ch in enumerate(content) if ch == '\n')

        self._cache[file_path] = (content, line_offsets)
        return self._cache[file_path]

    def extract_snippet(self, file_path: str, pos: int, end: int) -> Optional[ExtractedSnippet]:
        """
        Extract the code between two offsets of a file.

        Args:
            file_path: File path as recorded in the trace
            pos: Start offset (inclusive)
            end: End offset (exclusive)

        Returns:
            ExtractedSnippet, or None if the file is unavailable or the
            range is invalid
        """
        file_data = self._load_file(file_path)
        if file_data is None:
            return None

        content, line_offsets = file_data
        if pos < 0 or end > len(content) or pos >= end:
            return None

        code = content[pos:end]
        truncated = False
        if len(code) > self.max_snippet_length:
            code = code[:self.max_snippet_length] + '...'
            truncated = True

        line, column = self._calculate_line_column(line_offsets, pos)
        return ExtractedSnippet(
            code=code.strip(),
            line_number=line,
            column_number=column,
            truncated=truncated,
        )

    def extract_batch(self, locations: List[Tuple[str, int, int]]) -> Dict[str, Optional[ExtractedSnippet]]:
        """
        Extract snippets for many locations, grouped by file.

        Args:
            locations: List of (file_path, pos, end) tuples

        Returns:
            Dictionary mapping "file_path:pos:end" -> snippet (or None)
        """
        by_file: Dict[str, List[Tuple[int, int]]] = {}
        for file_path, pos, end in locations:
            by_file.setdefault(file_path, []).append((pos, end))

        results = {}
        for file_path, ranges in by_file.items():
            for pos, end in ranges:
                results[f"{file_path}:{pos}:{end}"] = self.extract_snippet(file_path, pos, end)
            if len(by_file) > BATCH_CACHE_FILE_LIMIT:
                self._cache.pop(file_path, None)

        return results

    def enrich_events(self, events: List[ProcessedEvent]) -> List[ProcessedEvent]:
        """
        Return a copy of events where located events carry snippet metadata.

        Events with a file path and pos/end args get 'codeSnippet',
        'lineNumber' and 'columnNumber' merged into a copy of their args.
        Events are never modified in place.

        Args:
            events: Processed events

        Returns:
            New list of events
        """
        targets = []
        for index, event in enumerate(events):
            if not event.file_path:
                continue
            position = ArgsExtractor.extract_position(event.args)
            if position is not None:
                targets.append((index, (event.file_path, position[0], position[1])))

        snippets = self.extract_batch([loc for _, loc in targets])

        enriched = list(events)
        for index, (file_path, pos, end) in targets:
            snippet = snippets.get(f"{file_path}:{pos}:{end}")
            if snippet is None:
                continue
            event = enriched[index]
            enriched[index] = replace(event, args={
                **event.args,
                'codeSnippet': snippet.code,
                'lineNumber': snippet.line_number,
                'columnNumber': snippet.column_number,
            })

        logger.debug("Attached snippets to %d of %d located events",
                     sum(1 for s in snippets.values() if s), len(targets))
        return enriched

    def clear_cache(self) -> None:
        self._cache.clear()
        self._path_mappings.clear()
