"""Data extraction utilities for trace events."""

from .args_extractor import ArgsExtractor
from .snippet_extractor import SnippetExtractor, ExtractedSnippet

__all__ = ["ArgsExtractor", "SnippetExtractor", "ExtractedSnippet"]
