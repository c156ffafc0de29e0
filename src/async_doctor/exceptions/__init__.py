"""Exception hierarchy for Async Doctor."""

from .analysis import (
    AnalysisError,
    FileAccessError,
    ParsingError,
    ReportWriteError,
    StaleFixError,
)
from .base import AsyncDoctorError
from .config import ConfigurationError
from .trace import TraceFormatError

__all__ = [
    "AsyncDoctorError",
    "AnalysisError",
    "FileAccessError",
    "ParsingError",
    "ReportWriteError",
    "StaleFixError",
    "TraceFormatError",
    "ConfigurationError",
]
