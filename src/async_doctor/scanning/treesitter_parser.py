"""Tree-sitter parser wrapper.

Provides the syntax trees the rule engine walks. One grammar per source
flavour: plain JavaScript (JSX included), TypeScript, TSX, and Python for
asyncio code.

Usage:
    parser = TreeSitterParser()
    tree = parser.parse(code_bytes, "typescript")
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Optional

import tree_sitter
import tree_sitter_javascript
import tree_sitter_python
import tree_sitter_typescript

from ..exceptions import ParsingError

if TYPE_CHECKING:
    from tree_sitter import Node, Tree

_GRAMMARS = {
    "javascript": tree_sitter_javascript.language,
    "typescript": tree_sitter_typescript.language_typescript,
    "tsx": tree_sitter_typescript.language_tsx,
    "python": tree_sitter_python.language,
}

EXTENSION_LANGUAGES = {
    ".js": "javascript",
    ".jsx": "javascript",
    ".mjs": "javascript",
    ".cjs": "javascript",
    ".ts": "typescript",
    ".mts": "typescript",
    ".cts": "typescript",
    ".tsx": "tsx",
    ".py": "python",
}


def detect_language(path: Path) -> str:
    """Map a file path to the grammar used to parse it."""
    return EXTENSION_LANGUAGES.get(path.suffix.lower(), "javascript")


def first_error(node: Node) -> Optional[Node]:
    """Return the first ERROR or MISSING node in document order."""
    stack = [node]
    while stack:
        current = stack.pop()
        if current.type == "ERROR" or current.is_missing:
            return current
        if current.has_error:
            stack.extend(reversed(current.children))
    return None


class TreeSitterParser:
    """Wrapper around tree-sitter for the JavaScript family and Python.

    Language objects are built once and shared; a fresh ``Parser`` is
    created per call so one instance can serve several worker threads.
    """

    def __init__(self) -> None:
        self._languages = {
            name: tree_sitter.Language(grammar()) for name, grammar in _GRAMMARS.items()
        }

    def is_language_supported(self, language: str) -> bool:
        return language in self._languages

    def parse(self, code: bytes, language: str, filepath: Optional[Path] = None) -> Tree:
        """Parse code and return the syntax tree.

        Args:
            code: Source code as bytes
            language: "javascript", "typescript", "tsx" or "python"
            filepath: Only used in error messages

        Returns:
            The parsed tree

        Raises:
            ParsingError: If the language is unknown or the source has
                syntax errors
        """
        where = filepath or Path("<memory>")
        lang = self._languages.get(language)
        if lang is None:
            raise ParsingError(where, language, "no grammar for language")

        tree = tree_sitter.Parser(lang).parse(code)
        root = tree.root_node
        if root.has_error:
            bad = first_error(root)
            if bad is not None:
                row, col = bad.start_point
                reason = f"syntax error at {row + 1}:{col + 1}"
            else:
                reason = "syntax error"
            raise ParsingError(where, language, reason)
        return tree
