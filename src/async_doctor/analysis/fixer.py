"""Apply a finding's suggested fix to the file on disk.

The fix is recomputed from the current file content, so a finding from an
older report is only applied if the same rule still fires at the same spot.
The previous content is kept next to the file as ``<name>.bak``.
"""

from __future__ import annotations

import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from ..exceptions import FileAccessError, StaleFixError
from ..logging_config import get_logger
from ..models import Finding, Fix
from .analyzer import StaticAnalyzer

logger = get_logger(__name__)


@dataclass(frozen=True)
class FixOutcome:
    applied: bool
    reverted: bool = False
    backup: Optional[Path] = None
    message: str = ""


def splice(source: bytes, fix: Fix) -> bytes:
    """Replace ``source[fix.start:fix.end]`` with the fix text."""
    return source[: fix.start] + fix.text.encode("utf-8") + source[fix.end :]


def apply_fix(
    root: Path,
    finding: Finding,
    analyzer: Optional[StaticAnalyzer] = None,
    test_cmd: Optional[str] = None,
) -> FixOutcome:
    """Apply ``finding``'s fix under ``root``.

    Args:
        root: Project root the finding's path is relative to
        finding: The finding to fix
        analyzer: Analyzer used to recompute the fix (a default one otherwise)
        test_cmd: Shell command run after writing; a nonzero exit restores
            the previous content

    Returns:
        What happened

    Raises:
        FileAccessError: If the file cannot be read or written
        StaleFixError: If the finding no longer matches the file
    """
    if not finding.fixable:
        return FixOutcome(applied=False, message=f"Issue {finding.id} ({finding.rule}) is not auto-fixable.")

    analyzer = analyzer or StaticAnalyzer()
    path = Path(root).resolve() / finding.file
    try:
        original = path.read_bytes()
    except OSError as e:
        raise FileAccessError(path, str(e))

    current = analyzer.analyze_file(path, Path(root).resolve())
    fresh = next(
        (
            f
            for f in current
            if f.rule == finding.rule and f.line == finding.line and f.column == finding.column
        ),
        None,
    )
    if fresh is None or fresh.fix is None:
        raise StaleFixError(path, finding.id)

    backup = path.with_name(path.name + ".bak")
    try:
        backup.write_bytes(original)
        path.write_bytes(splice(original, fresh.fix))
    except OSError as e:
        raise FileAccessError(path, str(e))
    logger.info(f"Applied fix for issue {finding.id} in {finding.file}")

    if test_cmd:
        result = subprocess.run(test_cmd, shell=True, cwd=str(Path(root).resolve()))
        if result.returncode != 0:
            try:
                path.write_bytes(original)
            except OSError as e:
                raise FileAccessError(path, str(e))
            return FixOutcome(
                applied=False,
                reverted=True,
                backup=backup,
                message=f"Fix reverted: tests failed for issue {finding.id}.",
            )

    return FixOutcome(applied=True, backup=backup, message=f"Fix applied for issue {finding.id}.")
