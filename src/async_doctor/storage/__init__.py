"""Persistence of analysis jobs for the HTTP API."""

from .jobs import Job, JobNotFoundError, JobStore

__all__ = ["Job", "JobStore", "JobNotFoundError"]
