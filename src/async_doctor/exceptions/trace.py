"""Trace-related exceptions."""

from .base import AsyncDoctorError


class TraceFormatError(AsyncDoctorError):
    """Raised when a trace payload is neither an event list nor ``{"events": [...]}``."""

    def __init__(self, found: str):
        super().__init__(
            "Trace must be a JSON array or an object with an 'events' array",
            details={"found": found},
        )
        self.found = found
