"""
Metadata extraction from trace event argument bags.
"""

from typing import Any, Dict, List, Optional, Tuple


# Checked in order; the first present value wins
FILE_PATH_KEYS = ('path', 'fileName', 'containingFileName', 'configFilePath')


class ArgsExtractor:
    """Extracts file and AST position information from event args."""

    @staticmethod
    def extract_file_path(args: Optional[Dict[str, Any]]) -> Optional[str]:
        """
        Extract the source file path from an event's args.
        Searches 'path', 'fileName', 'containingFileName' and 'configFilePath'.

        Args:
            args: Event argument dictionary (may be None)

        Returns:
            File path string or None if no candidate key holds a value
        """
        if not args:
            return None
        for key in FILE_PATH_KEYS:
            value = args.get(key)
            if value:
                return value
        return None

    @staticmethod
    def extract_position(args: Optional[Dict[str, Any]]) -> Optional[Tuple[int, int]]:
        """
        Extract the AST byte range from an event's args.

        Args:
            args: Event argument dictionary (may be None)

        Returns:
            Tuple of (pos, end), or None unless both are present
        """
        if not args:
            return None
        pos = args.get('pos')
        end = args.get('end')
        if pos is None or end is None:
            return None
        return pos, end

    @staticmethod
    def extract_type_ids(args: Dict[str, Any]) -> List[int]:
        """Collect the sourceId/targetId type references, in that order."""
        return [args[key] for key in ('sourceId', 'targetId') if args.get(key) is not None]

    @staticmethod
    def extract_snippet_info(args: Dict[str, Any]) -> Tuple[Optional[str], Optional[int], Optional[int]]:
        """
        Extract snippet metadata merged into args by snippet enrichment.

        Returns:
            Tuple of (code_snippet, line_number, column_number)
        """
        return args.get('codeSnippet'), args.get('lineNumber'), args.get('columnNumber')
