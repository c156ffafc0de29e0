"""Static analyzer: discovers files, runs the rule engine, builds the report.

Findings get their ids only after every file is done and the whole set is
sorted by (file, line, column, rule), so ids depend on content alone and not
on the order in which files were read or finished.
"""

from __future__ import annotations

import os
from concurrent.futures import ThreadPoolExecutor
from dataclasses import replace
from pathlib import Path
from typing import TYPE_CHECKING, Iterable, Optional, Sequence

from ..config import DEFAULT_CONFIG, AnalysisConfig
from ..exceptions import FileAccessError, ParsingError
from ..logging_config import get_logger
from ..models import Finding, SkippedFile, StaticReport
from ..rules import Rule
from ..scanning import TreeSitterParser, detect_language, discover_files
from .engine import EngineMatch, RuleEngine

if TYPE_CHECKING:
    from tree_sitter import Node

logger = get_logger(__name__)

# Default worker count: use CPU count, capped at 8 to avoid overwhelming I/O
_DEFAULT_WORKERS = min(os.cpu_count() or 4, 8)


def char_column(source: bytes, node: Node) -> int:
    """1-based character column of ``node`` (tree-sitter columns are bytes)."""
    byte_col = node.start_point[1]
    prefix = source[node.start_byte - byte_col : node.start_byte]
    return len(prefix.decode("utf-8", errors="replace")) + 1


def build_report(findings: Iterable[Finding], skipped: Iterable[SkippedFile] = ()) -> StaticReport:
    """Sort findings globally and number them from 1."""
    ordered = sorted(findings, key=Finding.sort_key)
    numbered = tuple(replace(f, id=index) for index, f in enumerate(ordered, start=1))
    return StaticReport(
        findings=numbered,
        skipped=tuple(sorted(skipped, key=lambda s: s.path)),
    )


class StaticAnalyzer:
    """Runs all rules over every source file of a project.

    Usage:
        analyzer = StaticAnalyzer()
        report = analyzer.analyze("path/to/project")
    """

    def __init__(
        self,
        config: AnalysisConfig = DEFAULT_CONFIG,
        rules: Optional[Sequence[Rule]] = None,
    ) -> None:
        self.config = config
        self.engine = RuleEngine(rules)
        self.parser = TreeSitterParser()

    def analyze(self, root_dir: Path | str) -> StaticReport:
        """Analyze every source file under ``root_dir``.

        Files that fail to parse are recorded in ``report.skipped`` and the
        run continues.

        Raises:
            FileAccessError: If the root is not a directory or a file cannot
                be read
        """
        root = Path(root_dir).resolve()
        if not root.is_dir():
            raise FileAccessError(root, "not a directory")

        files = discover_files(root, self.config)
        findings: list[Finding] = []
        skipped: list[SkippedFile] = []

        workers = self.config.workers or _DEFAULT_WORKERS
        if workers == 1 or len(files) < 10:
            results = [self._analyze_or_skip(path, root) for path in files]
        else:
            with ThreadPoolExecutor(max_workers=workers) as executor:
                results = list(executor.map(lambda p: self._analyze_or_skip(p, root), files))

        for file_findings, skip in results:
            findings.extend(file_findings)
            if skip is not None:
                skipped.append(skip)

        report = build_report(findings, skipped)
        logger.info(
            f"Analysis complete: {len(files)} files, {len(report.findings)} findings, "
            f"{len(report.skipped)} skipped"
        )
        return report

    def _analyze_or_skip(
        self, path: Path, root: Path
    ) -> tuple[list[Finding], Optional[SkippedFile]]:
        try:
            return self.analyze_file(path, root), None
        except ParsingError as e:
            logger.warning(f"Parse error for {path}: {e.reason}")
            return [], SkippedFile(path=_relative(path, root), reason=e.reason)

    def analyze_file(self, path: Path, root: Path) -> list[Finding]:
        """Findings for one file, unnumbered (id 0).

        Raises:
            FileAccessError: If the file cannot be read
            ParsingError: If the file has syntax errors
        """
        try:
            source = path.read_bytes()
        except OSError as e:
            raise FileAccessError(path, str(e))
        return self.analyze_source(source, _relative(path, root), detect_language(path), path)

    def analyze_source(
        self,
        source: bytes,
        rel_path: str,
        language: str = "javascript",
        filepath: Optional[Path] = None,
    ) -> list[Finding]:
        """Findings for in-memory source, unnumbered (id 0)."""
        tree = self.parser.parse(source, language, filepath or Path(rel_path))
        matches = self.engine.run(tree, source, language)
        return [self._to_finding(match, source, rel_path) for match in matches]

    def _to_finding(self, match: EngineMatch, source: bytes, rel_path: str) -> Finding:
        region = match.region
        return Finding(
            id=0,
            file=rel_path,
            line=match.node.start_point[0] + 1,
            column=char_column(source, match.node),
            rule=match.rule.name,
            message=match.rule.message,
            fixable=match.fix is not None,
            func_start=region.start_point[0] + 1,
            func_snippet=source[region.start_byte : region.end_byte].decode("utf-8", errors="replace"),
            fix=match.fix,
        )


def _relative(path: Path, root: Path) -> str:
    try:
        return path.resolve().relative_to(root).as_posix()
    except ValueError:
        return path.as_posix()
