"""Match runtime events to the findings whose function they ran in."""

from __future__ import annotations

from collections import Counter
from pathlib import Path
from typing import Iterable, Union

from ..logging_config import get_logger
from ..models import DynamicOverlay, OverlaySummary, PromiseEvent, StaticReport
from ..tracer.callsite import IO, USER
from .trace_io import parse_location, relative_location

logger = get_logger(__name__)


def correlate(
    report: StaticReport,
    events: Iterable[PromiseEvent],
    root: Union[str, Path] = ".",
) -> DynamicOverlay:
    """Count, per finding, the events created inside its function.

    An event executes a finding when both name the same file and the
    event's line falls in ``[funcStart, funcEnd]``. Events without a
    resolvable location only count toward the totals.
    """
    by_file: dict[str, list[tuple[int, int, int, str]]] = {}
    for finding in report.findings:
        by_file.setdefault(finding.file, []).append(
            (finding.func_start, finding.func_end, finding.id, finding.rule)
        )

    exec_counts: Counter[int] = Counter()
    per_rule: Counter[str] = Counter()
    total = user = library = io = 0
    unmatched = 0

    for event in events:
        total += 1
        if event.origin == USER:
            user += 1
        else:
            library += 1
        if event.origin == IO:
            io += 1

        parsed = parse_location(event.location)
        if parsed is None:
            unmatched += 1
            continue
        path, line = parsed
        ranges = by_file.get(relative_location(path, root), ())
        hit = False
        for start, end, finding_id, rule in ranges:
            if start <= line <= end:
                exec_counts[finding_id] += 1
                per_rule[rule] += 1
                hit = True
        if not hit:
            unmatched += 1

    logger.debug(f"Correlated {total} events; {unmatched} matched no finding")
    summary = OverlaySummary(
        total_events=total,
        user_events=user,
        library_events=library,
        io_events=io,
        executed_finding_count=len(exec_counts),
        per_rule_executed_counts=dict(sorted(per_rule.items())),
    )
    return DynamicOverlay(exec_counts=dict(sorted(exec_counts.items())), summary=summary)
