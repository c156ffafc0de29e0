"""Recursive source discovery."""

from __future__ import annotations

import os
from pathlib import Path

from ..config import DEFAULT_CONFIG, AnalysisConfig
from ..logging_config import get_logger

logger = get_logger(__name__)


def discover_files(root_dir: Path, config: AnalysisConfig = DEFAULT_CONFIG) -> list[Path]:
    """Find analyzable source files under ``root_dir``.

    Hidden directories and dependency directories are pruned. The result is
    sorted so the walk order of the filesystem never leaks into reports.

    Args:
        root_dir: Directory to walk
        config: Supplies extensions, excluded directories and the size limit

    Returns:
        Absolute paths of matching files
    """
    root = Path(root_dir).resolve()
    ext_set = {ext.lower() for ext in config.extensions}
    excluded = set(config.exclude_dirs)
    files: list[Path] = []
    skipped = 0

    for dirpath, dirnames, filenames in os.walk(root):
        dirnames[:] = [d for d in dirnames if not d.startswith(".") and d not in excluded]
        for name in filenames:
            path = Path(dirpath) / name
            if path.suffix.lower() not in ext_set:
                continue
            try:
                if path.stat().st_size > config.max_file_size_bytes:
                    skipped += 1
                    logger.debug(f"Skipped (size): {path}")
                    continue
            except OSError as e:
                logger.warning(f"Cannot stat {path}: {e}")
                continue
            files.append(path)

    files.sort()
    logger.info(f"Discovered {len(files)} source files under {root} ({skipped} too large)")
    return files
