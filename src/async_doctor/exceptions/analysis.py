"""Analysis-related exceptions: file access, parsing, report writing, fixes."""

from pathlib import Path

from .base import AsyncDoctorError


class AnalysisError(AsyncDoctorError):
    """Base class for analysis-related errors."""
    pass


class FileAccessError(AnalysisError):
    """Raised when a source file cannot be accessed or read."""

    def __init__(self, filepath: Path, reason: str):
        super().__init__(
            f"Cannot access file: {filepath}",
            details={"filepath": str(filepath), "reason": reason},
        )
        self.filepath = filepath
        self.reason = reason


class ParsingError(AnalysisError):
    """Raised when file content cannot be parsed."""

    def __init__(self, filepath: Path, language: str, reason: str):
        super().__init__(
            f"Failed to parse {language} file: {filepath}",
            details={"filepath": str(filepath), "language": language, "reason": reason},
        )
        self.filepath = filepath
        self.language = language
        self.reason = reason


class ReportWriteError(AnalysisError):
    """Raised when a report or overlay cannot be written."""

    def __init__(self, path: Path, reason: str):
        super().__init__(
            f"Cannot write report: {path}",
            details={"path": str(path), "reason": reason},
        )
        self.path = path
        self.reason = reason


class StaleFixError(AnalysisError):
    """Raised when a file changed since the finding's fix was computed."""

    def __init__(self, filepath: Path, finding_id: int):
        super().__init__(
            f"Source changed since analysis, refusing to apply fix #{finding_id}",
            details={"filepath": str(filepath)},
        )
        self.filepath = filepath
        self.finding_id = finding_id
