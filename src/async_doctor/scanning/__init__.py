"""Source discovery and the tree-sitter syntax provider."""

from .discovery import discover_files
from .treesitter_parser import TreeSitterParser, detect_language

__all__ = ["TreeSitterParser", "detect_language", "discover_files"]
