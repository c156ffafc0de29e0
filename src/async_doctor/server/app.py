"""Starlette ASGI application exposing the job store."""

from __future__ import annotations

import json
import logging
from pathlib import Path

from starlette.applications import Starlette
from starlette.concurrency import run_in_threadpool
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from starlette.routing import Route

from ..exceptions import AsyncDoctorError, FileAccessError
from ..storage import JobNotFoundError, JobStore

logger = logging.getLogger(__name__)


def _error(message: str, status_code: int) -> JSONResponse:
    return JSONResponse({"error": message}, status_code=status_code)


def create_app(store: JobStore) -> Starlette:
    """Build the Starlette application wired to *store*."""

    async def health(request: Request) -> JSONResponse:
        return JSONResponse({"status": "ok"})

    async def analyze(request: Request) -> JSONResponse:
        try:
            body = await request.json()
        except json.JSONDecodeError:
            return _error("Request body must be JSON.", 400)
        path = body.get("path") if isinstance(body, dict) else None
        if not isinstance(path, str) or not path:
            return _error('Missing or invalid "path" field.', 400)
        if not Path(path).is_dir():
            return _error(f"Not a directory: {path}", 400)

        try:
            job, report = await run_in_threadpool(store.create, Path(path))
        except AsyncDoctorError as e:
            logger.error(f"Analyze failed: {e}")
            return _error(e.message, 500)

        return JSONResponse(
            {
                "jobId": job.id,
                "reportUrl": f"/api/jobs/{job.id}/report",
                "findings": report.to_list(),
                "skipped": [s.to_dict() for s in report.skipped],
            }
        )

    async def upload_trace(request: Request) -> JSONResponse:
        job_id = request.path_params["job_id"]
        try:
            trace = await request.json()
        except json.JSONDecodeError:
            return _error("Trace must be valid JSON.", 400)

        try:
            await run_in_threadpool(store.attach_trace, job_id, trace)
            merged = await run_in_threadpool(store.merged_report, job_id)
        except JobNotFoundError:
            return _error("No static analysis found for this job. Run analysis first.", 404)
        except AsyncDoctorError as e:
            logger.error(f"Trace upload failed for {job_id}: {e}")
            return _error(e.message, 500)

        return JSONResponse(
            {"jobId": job_id, "reportUrl": f"/api/jobs/{job_id}/report", **merged.to_dict()}
        )

    async def report(request: Request) -> JSONResponse:
        job_id = request.path_params["job_id"]
        try:
            merged = await run_in_threadpool(store.merged_report, job_id)
        except JobNotFoundError:
            return _error("Report not found", 404)
        except FileAccessError as e:
            return _error(e.message, 500)
        return JSONResponse({"jobId": job_id, **merged.to_dict()})

    async def delete_job(request: Request) -> Response:
        job_id = request.path_params["job_id"]
        try:
            await run_in_threadpool(store.delete, job_id)
        except JobNotFoundError:
            return _error("Job not found", 404)
        except OSError as e:
            logger.error(f"Failed to delete job {job_id}: {e}")
            return _error("Failed to delete job", 500)
        return JSONResponse({"ok": True})

    routes = [
        Route("/api/health", health),
        Route("/api/analyze", analyze, methods=["POST"]),
        Route("/api/jobs/{job_id}/trace", upload_trace, methods=["POST"]),
        Route("/api/jobs/{job_id}/report", report),
        Route("/api/jobs/{job_id}", delete_job, methods=["DELETE"]),
    ]

    return Starlette(routes=routes)
