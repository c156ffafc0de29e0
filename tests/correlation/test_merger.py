"""Tests for merging a static report with a dynamic overlay."""

from async_doctor.correlation import correlate, merge
from async_doctor.models import Finding, PromiseEvent, StaticReport


def _report():
    findings = tuple(
        Finding(
            id=i,
            file="a.js",
            line=i * 10 + 1,
            column=1,
            rule="await-in-loop",
            message="m",
            fixable=False,
            func_start=i * 10,
            func_snippet="a\nb\nc",
        )
        for i in (1, 2)
    )
    return StaticReport(findings=findings)


def _events(*lines):
    return [PromiseEvent(id=n, trigger_id=None, type="Task", start=0.0, location=f"a.js:{line}") for n, line in enumerate(lines, 1)]


class TestMerge:
    def test_exec_count_defaults_to_zero(self):
        report = _report()
        merged = merge(report, correlate(report, _events(11)))
        assert [f.exec_count for f in merged.findings] == [1, 0]
        assert merged.dynamic.total_events == 1

    def test_without_overlay(self):
        merged = merge(_report())
        assert [f.exec_count for f in merged.findings] == [0, 0]
        assert merged.to_dict()["dynamic"] is None

    def test_overlays_do_not_leak(self):
        """Merging with a second overlay shows only the second overlay's data."""
        report = _report()
        first = merge(report, correlate(report, _events(10, 11, 12)))
        second = merge(report, correlate(report, _events(21)))
        assert [f.exec_count for f in first.findings] == [3, 0]
        assert [f.exec_count for f in second.findings] == [0, 1]
        assert second.dynamic.total_events == 1
        assert report == _report()

    def test_wire_format(self):
        report = _report()
        data = merge(report, correlate(report, _events(11))).to_dict()
        assert data["findings"][0]["execCount"] == 1
        assert data["findings"][0]["funcStart"] == 10
        assert data["dynamic"]["executedFindingCount"] == 1
