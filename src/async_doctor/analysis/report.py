"""Reading and writing the static report JSON."""

from __future__ import annotations

import json
from pathlib import Path

from ..exceptions import FileAccessError, ReportWriteError
from ..models import StaticReport


def write_report(report: StaticReport, path: Path) -> Path:
    """Write the findings array to ``path`` (pretty-printed)."""
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(report.to_list(), indent=2), encoding="utf-8")
    except OSError as e:
        raise ReportWriteError(path, str(e))
    return path


def load_report(path: Path) -> StaticReport:
    """Load a report written by :func:`write_report` (or ``{"findings": [...]}``).

    Raises:
        FileAccessError: If the file is unreadable, not JSON, or holds a
            finding without ``id``, ``file`` or ``line``
    """
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise FileAccessError(path, str(e))
    except json.JSONDecodeError as e:
        raise FileAccessError(path, f"invalid JSON: {e}")
    try:
        return StaticReport.from_data(data)
    except KeyError as e:
        raise FileAccessError(path, f"finding without required field {e}")
    except (TypeError, ValueError) as e:
        raise FileAccessError(path, f"malformed finding: {e}")
