"""Configuration-related exceptions."""

from .base import AsyncDoctorError


class ConfigurationError(AsyncDoctorError):
    """Raised when configuration is invalid or cannot be loaded."""
    pass
