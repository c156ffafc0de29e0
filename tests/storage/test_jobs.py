"""Tests for the on-disk job store."""

import json

import pytest

from async_doctor.storage import JobNotFoundError, JobStore
from async_doctor.storage.jobs import OVERLAY_FILE, PROJECT_FILE, REPORT_FILE


@pytest.fixture
def store(tmp_path):
    return JobStore(tmp_path / "jobs")


class TestCreate:
    """Analysis jobs are written to their own directory."""

    def test_writes_job_files(self, store, sample_project):
        job, report = store.create(sample_project)
        assert len(job.id) == 32
        assert (job.directory / PROJECT_FILE).is_file()
        assert (job.directory / REPORT_FILE).is_file()
        assert not (job.directory / OVERLAY_FILE).exists()
        assert [f.rule for f in report.findings] == ["async-function-awaited-return", "await-in-loop"]

        project = json.loads((job.directory / PROJECT_FILE).read_text(encoding="utf-8"))
        assert project["root"] == str(sample_project.resolve())

    def test_each_job_gets_its_own_id(self, store, sample_project):
        first, _ = store.create(sample_project)
        second, _ = store.create(sample_project)
        assert first.id != second.id

    def test_get_round_trips_project_root(self, store, sample_project):
        job, _ = store.create(sample_project)
        loaded = store.get(job.id)
        assert loaded.project_root == sample_project.resolve()
        assert loaded.directory == job.directory


class TestTraces:
    """Overlay persistence and merging."""

    def test_report_without_trace(self, store, sample_project):
        job, _ = store.create(sample_project)
        assert store.overlay(job.id) is None
        merged = store.merged_report(job.id)
        assert merged.dynamic is None
        assert [f.exec_count for f in merged.findings] == [0, 0]

    def test_attach_trace_persists_overlay(self, store, sample_project):
        job, _ = store.create(sample_project)
        overlay = store.attach_trace(
            job.id,
            [
                {"id": 1, "start": 0, "location": "src/loader.js:4", "origin": "user"},
                {"id": 2, "start": 1, "location": "src/api.js:2", "origin": "io"},
            ],
        )
        assert overlay.exec_counts == {1: 1, 2: 1}
        assert store.overlay(job.id) == overlay

        merged = store.merged_report(job.id)
        assert [f.exec_count for f in merged.findings] == [1, 1]
        assert merged.dynamic.io_events == 1

    def test_malformed_trace_records_empty_overlay(self, store, sample_project):
        job, _ = store.create(sample_project)
        overlay = store.attach_trace(job.id, "not a trace")
        assert overlay.summary.total_events == 0
        assert store.overlay(job.id) is not None


class TestLookup:
    """Unknown and invalid job ids."""

    @pytest.mark.parametrize("job_id", ["", "../etc", "NOT-HEX", "0" * 31, "0123456789abcdef0123456789abcdef"])
    def test_unknown_ids(self, store, job_id):
        with pytest.raises(JobNotFoundError):
            store.get(job_id)

    def test_delete_removes_directory(self, store, sample_project):
        job, _ = store.create(sample_project)
        store.delete(job.id)
        assert not job.directory.exists()
        with pytest.raises(JobNotFoundError):
            store.static_report(job.id)
        with pytest.raises(JobNotFoundError):
            store.delete(job.id)
