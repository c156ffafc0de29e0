"""Combine a static report with a dynamic overlay."""

from __future__ import annotations

from typing import Optional

from ..models import DynamicOverlay, MergedFinding, MergedReport, StaticReport


def merge(report: StaticReport, overlay: Optional[DynamicOverlay] = None) -> MergedReport:
    """Attach ``execCount`` to every finding and the overlay summary.

    Neither argument is modified; call it again whenever the overlay
    changes.
    """
    counts = overlay.exec_counts if overlay is not None else {}
    return MergedReport(
        findings=tuple(MergedFinding(f, counts.get(f.id, 0)) for f in report.findings),
        dynamic=overlay.summary if overlay is not None else None,
    )
