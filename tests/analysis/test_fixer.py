"""Tests for applying a finding's fix on disk."""

import sys

import pytest

from async_doctor.analysis import StaticAnalyzer, apply_fix
from async_doctor.exceptions import StaleFixError


def _command(exit_code: int) -> str:
    return f'"{sys.executable}" -c "import sys; sys.exit({exit_code})"'


class TestApplyFix:
    """Backup, splice, verification and staleness."""

    def test_applies_fix_and_keeps_backup(self, sample_project):
        report = StaticAnalyzer().analyze(sample_project)
        finding = report.get(1)
        target = sample_project / "src/api.js"
        original = target.read_text()

        outcome = apply_fix(sample_project, finding)

        assert outcome.applied is True
        assert "return db.find(id);" in target.read_text()
        assert outcome.backup.read_text() == original

    def test_unfixable_finding_is_left_alone(self, sample_project):
        report = StaticAnalyzer().analyze(sample_project)
        finding = report.get(2)
        before = (sample_project / "src/loader.js").read_text()

        outcome = apply_fix(sample_project, finding)

        assert outcome.applied is False
        assert "not auto-fixable" in outcome.message
        assert (sample_project / "src/loader.js").read_text() == before

    def test_changed_file_is_stale(self, sample_project):
        report = StaticAnalyzer().analyze(sample_project)
        target = sample_project / "src/api.js"
        target.write_text("// header\n" + target.read_text())

        with pytest.raises(StaleFixError):
            apply_fix(sample_project, report.get(1))

    def test_failing_verification_reverts(self, sample_project):
        report = StaticAnalyzer().analyze(sample_project)
        target = sample_project / "src/api.js"
        original = target.read_text()

        outcome = apply_fix(sample_project, report.get(1), test_cmd=_command(1))

        assert outcome.reverted is True
        assert outcome.applied is False
        assert target.read_text() == original

    def test_passing_verification_keeps_fix(self, sample_project):
        report = StaticAnalyzer().analyze(sample_project)
        outcome = apply_fix(sample_project, report.get(1), test_cmd=_command(0))
        assert outcome.applied is True
        assert "await" not in (sample_project / "src/api.js").read_text()
