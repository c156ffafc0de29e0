"""Data models shared by the analyzer, tracer and correlator.

Wire names (camelCase) are produced by ``to_dict`` so reports stay
compatible with the job-management API and existing trace captures.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional


@dataclass(frozen=True)
class Fix:
    """Replace source bytes ``[start, end)`` with ``text``."""

    start: int
    end: int
    text: str

    def to_dict(self) -> dict[str, Any]:
        return {"start": self.start, "end": self.end, "text": self.text}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Fix:
        return cls(start=int(data["start"]), end=int(data["end"]), text=str(data["text"]))


@dataclass(frozen=True)
class Finding:
    id: int  # assigned after the global sort, 0 until then
    file: str  # project-relative, forward slashes
    line: int  # 1-based
    column: int  # 1-based, in characters
    rule: str  # "await-in-loop", ...
    message: str
    fixable: bool
    func_start: int  # line of the enclosing function
    func_snippet: str  # source text of the enclosing function
    fix: Optional[Fix] = None

    @property
    def func_end(self) -> int:
        """Last line covered by the enclosing function (inclusive)."""
        return self.func_start + max(1, len(self.func_snippet.splitlines())) - 1

    def sort_key(self) -> tuple[str, int, int, str]:
        return (self.file, self.line, self.column, self.rule)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "id": self.id,
            "file": self.file,
            "line": self.line,
            "column": self.column,
            "rule": self.rule,
            "message": self.message,
            "fixable": self.fixable,
            "funcStart": self.func_start,
            "funcSnippet": self.func_snippet,
        }
        if self.fix is not None:
            data["fix"] = self.fix.to_dict()
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Finding:
        fix = data.get("fix")
        return cls(
            id=int(data["id"]),
            file=str(data["file"]),
            line=int(data["line"]),
            column=int(data.get("column", 1)),
            rule=str(data.get("rule") or data.get("pattern", "")),
            message=str(data.get("message", "")),
            fixable=bool(data.get("fixable", False)),
            func_start=int(data.get("funcStart", data["line"])),
            func_snippet=str(data.get("funcSnippet", "")),
            fix=Fix.from_dict(fix) if isinstance(fix, dict) else None,
        )


@dataclass(frozen=True)
class SkippedFile:
    path: str
    reason: str

    def to_dict(self) -> dict[str, str]:
        return {"path": self.path, "reason": self.reason}


@dataclass(frozen=True)
class StaticReport:
    """Ordered findings of one analysis run. Never mutated after creation."""

    findings: tuple[Finding, ...] = ()
    skipped: tuple[SkippedFile, ...] = ()

    def get(self, finding_id: int) -> Optional[Finding]:
        for finding in self.findings:
            if finding.id == finding_id:
                return finding
        return None

    def to_list(self) -> list[dict[str, Any]]:
        return [f.to_dict() for f in self.findings]

    @classmethod
    def from_data(cls, data: Any) -> StaticReport:
        """Accept a bare findings array or an object with ``findings``."""
        if isinstance(data, dict):
            data = data.get("findings", [])
        if not isinstance(data, list):
            return cls()
        return cls(findings=tuple(Finding.from_dict(item) for item in data if isinstance(item, dict)))


@dataclass
class PromiseEvent:
    """One tracked deferred task. ``end`` is written at most once."""

    id: int
    trigger_id: Optional[int]
    type: str
    start: float  # ms since tracer start
    end: Optional[float] = None
    location: Optional[str] = None  # "path:line[:col]"
    origin: Optional[str] = None  # user | library | io
    stack: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "id": self.id,
            "triggerId": self.trigger_id,
            "type": self.type,
            "start": self.start,
        }
        if self.end is not None:
            data["end"] = self.end
        if self.location is not None:
            data["location"] = self.location
        if self.origin is not None:
            data["origin"] = self.origin
        if self.stack is not None:
            data["stack"] = self.stack
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> PromiseEvent:
        trigger = data.get("triggerId")
        end = data.get("end")
        return cls(
            id=int(data.get("id", 0)),
            trigger_id=int(trigger) if isinstance(trigger, (int, float)) else None,
            type=str(data.get("type", "")),
            start=float(data.get("start", 0.0)),
            end=float(end) if isinstance(end, (int, float)) else None,
            location=data["location"] if isinstance(data.get("location"), str) else None,
            origin=data["origin"] if isinstance(data.get("origin"), str) else None,
            stack=data["stack"] if isinstance(data.get("stack"), str) else None,
        )


@dataclass(frozen=True)
class OverlaySummary:
    total_events: int = 0
    user_events: int = 0
    library_events: int = 0
    io_events: int = 0
    executed_finding_count: int = 0
    per_rule_executed_counts: dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "totalEvents": self.total_events,
            "userEvents": self.user_events,
            "libraryEvents": self.library_events,
            "ioEvents": self.io_events,
            "executedFindingCount": self.executed_finding_count,
            "perRuleExecutedCounts": dict(self.per_rule_executed_counts),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> OverlaySummary:
        return cls(
            total_events=int(data.get("totalEvents", 0)),
            user_events=int(data.get("userEvents", 0)),
            library_events=int(data.get("libraryEvents", 0)),
            io_events=int(data.get("ioEvents", 0)),
            executed_finding_count=int(data.get("executedFindingCount", 0)),
            per_rule_executed_counts={
                str(k): int(v) for k, v in (data.get("perRuleExecutedCounts") or {}).items()
            },
        )


@dataclass(frozen=True)
class DynamicOverlay:
    exec_counts: dict[int, int] = field(default_factory=dict)
    summary: OverlaySummary = field(default_factory=OverlaySummary)

    def to_dict(self) -> dict[str, Any]:
        return {
            "execCounts": {str(k): v for k, v in self.exec_counts.items()},
            "summary": self.summary.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> DynamicOverlay:
        counts = data.get("execCounts") or {}
        return cls(
            exec_counts={int(k): int(v) for k, v in counts.items()},
            summary=OverlaySummary.from_dict(data.get("summary") or {}),
        )


@dataclass(frozen=True)
class MergedFinding:
    finding: Finding
    exec_count: int = 0

    def to_dict(self) -> dict[str, Any]:
        data = self.finding.to_dict()
        data["execCount"] = self.exec_count
        return data


@dataclass(frozen=True)
class MergedReport:
    findings: tuple[MergedFinding, ...]
    dynamic: Optional[OverlaySummary] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "findings": [f.to_dict() for f in self.findings],
            "dynamic": self.dynamic.to_dict() if self.dynamic is not None else None,
        }
