"""On-disk store of analysis jobs.

Layout, one directory per job::

    <jobs_root>/<job_id>/
        project.json        {"root": "/abs/path/of/analyzed/project"}
        anti-patterns.json  static report (findings array)
        executions.json     dynamic overlay, present after a trace upload

The merged report is never stored; it is rebuilt from the two files on
every read so a new trace is always reflected.
"""

from __future__ import annotations

import json
import re
import shutil
import threading
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

from ..analysis import StaticAnalyzer, load_report, write_report
from ..correlation import correlate, merge, parse_trace
from ..exceptions import AsyncDoctorError, FileAccessError, ReportWriteError
from ..logging_config import get_logger
from ..models import DynamicOverlay, MergedReport, StaticReport

logger = get_logger(__name__)

REPORT_FILE = "anti-patterns.json"
OVERLAY_FILE = "executions.json"
PROJECT_FILE = "project.json"

_JOB_ID = re.compile(r"^[0-9a-f]{32}$")


class JobNotFoundError(AsyncDoctorError):
    """Raised when a job id is unknown or has no static report yet."""

    def __init__(self, job_id: str):
        super().__init__(f"Job not found: {job_id}", details={"job_id": job_id})
        self.job_id = job_id


@dataclass(frozen=True)
class Job:
    id: str
    directory: Path
    project_root: Path

    @property
    def report_path(self) -> Path:
        return self.directory / REPORT_FILE

    @property
    def overlay_path(self) -> Path:
        return self.directory / OVERLAY_FILE


class JobStore:
    """Creates, reads and deletes jobs under ``root``.

    Writes are serialized with a lock; reads go straight to disk.
    """

    def __init__(self, root: Path, analyzer: Optional[StaticAnalyzer] = None) -> None:
        self.root = Path(root)
        self.analyzer = analyzer or StaticAnalyzer()
        self._lock = threading.Lock()

    def _job_dir(self, job_id: str) -> Path:
        if not _JOB_ID.match(job_id):
            raise JobNotFoundError(job_id)
        return self.root / job_id

    def get(self, job_id: str) -> Job:
        directory = self._job_dir(job_id)
        project_file = directory / PROJECT_FILE
        if not project_file.is_file():
            raise JobNotFoundError(job_id)
        try:
            data = json.loads(project_file.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            raise FileAccessError(project_file, str(e))
        return Job(id=job_id, directory=directory, project_root=Path(data["root"]))

    def create(self, project_root: Path) -> tuple[Job, StaticReport]:
        """Analyze ``project_root`` and store the report under a new job.

        Raises:
            FileAccessError: If the project cannot be read
            ReportWriteError: If the job files cannot be written
        """
        project_root = Path(project_root).resolve()
        report = self.analyzer.analyze(project_root)

        job_id = uuid.uuid4().hex
        directory = self.root / job_id
        with self._lock:
            try:
                directory.mkdir(parents=True)
                (directory / PROJECT_FILE).write_text(
                    json.dumps({"root": str(project_root)}), encoding="utf-8"
                )
            except OSError as e:
                raise ReportWriteError(directory, str(e))
            write_report(report, directory / REPORT_FILE)

        logger.info(f"Job {job_id}: {len(report.findings)} findings in {project_root}")
        return Job(id=job_id, directory=directory, project_root=project_root), report

    def static_report(self, job_id: str) -> StaticReport:
        job = self.get(job_id)
        if not job.report_path.is_file():
            raise JobNotFoundError(job_id)
        return load_report(job.report_path)

    def overlay(self, job_id: str) -> Optional[DynamicOverlay]:
        job = self.get(job_id)
        if not job.overlay_path.is_file():
            return None
        try:
            data = json.loads(job.overlay_path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            raise FileAccessError(job.overlay_path, str(e))
        return DynamicOverlay.from_dict(data)

    def attach_trace(self, job_id: str, trace: Any) -> DynamicOverlay:
        """Correlate a decoded trace with the job's findings and persist it.

        A previous overlay is replaced.
        """
        job = self.get(job_id)
        report = self.static_report(job_id)
        overlay = correlate(report, parse_trace(trace), job.project_root)
        with self._lock:
            try:
                job.overlay_path.write_text(json.dumps(overlay.to_dict(), indent=2), encoding="utf-8")
            except OSError as e:
                raise ReportWriteError(job.overlay_path, str(e))
        logger.info(
            f"Job {job_id}: {overlay.summary.total_events} events, "
            f"{overlay.summary.executed_finding_count} findings executed"
        )
        return overlay

    def merged_report(self, job_id: str) -> MergedReport:
        return merge(self.static_report(job_id), self.overlay(job_id))

    def delete(self, job_id: str) -> None:
        directory = self.get(job_id).directory
        with self._lock:
            shutil.rmtree(directory)
