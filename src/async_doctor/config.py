"""Configuration loading and management for Async Doctor.

Configuration sources are merged in priority order:
    1. Defaults (defined in AnalysisConfig)
    2. Project config (./async-doctor.toml)
    3. Explicit config file
    4. Environment variables (ASYNC_DOCTOR_* prefix)
    5. CLI overrides (passed as kwargs)

The tracer runs inside someone else's process, so it only reads its own
environment variables (see TracerConfig.from_env).

Example:
    >>> config = load_config(workers=2)
    >>> config.workers
    2
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional, get_type_hints

from .exceptions import ConfigurationError

ENV_PREFIX = "ASYNC_DOCTOR_"

# Extensions the syntax provider has a grammar for.
SOURCE_EXTENSIONS = (".js", ".jsx", ".mjs", ".cjs", ".ts", ".tsx", ".mts", ".cts", ".py")


@dataclass(frozen=True)
class AnalysisConfig:
    """Configuration for a static analysis run.

    Attributes:
        extensions: Source file extensions to analyze
        exclude_dirs: Dependency/vendor directory names never descended into
        workers: Parallel file workers (None = auto, 1 = sequential)
        max_file_size_mb: Files larger than this are skipped
        report_filename: Name of the JSON report written into the target
    """

    extensions: tuple[str, ...] = SOURCE_EXTENSIONS
    exclude_dirs: tuple[str, ...] = field(
        default_factory=lambda: (
            "node_modules",
            "bower_components",
            "jspm_packages",
            "__pycache__",
            "site-packages",
            "venv",
        )
    )
    workers: Optional[int] = None
    max_file_size_mb: float = 5.0
    report_filename: str = "anti-patterns.json"

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        unknown = [ext for ext in self.extensions if ext not in SOURCE_EXTENSIONS]
        if unknown:
            raise ValueError(f"Unsupported extensions: {', '.join(unknown)}")
        if self.workers is not None and self.workers < 1:
            raise ValueError("workers must be at least 1")
        if self.max_file_size_mb <= 0:
            raise ValueError("max_file_size_mb must be positive")
        if not self.report_filename:
            raise ValueError("report_filename must not be empty")

    @property
    def max_file_size_bytes(self) -> int:
        """Get max file size in bytes."""
        return int(self.max_file_size_mb * 1024 * 1024)


DEFAULT_CONFIG = AnalysisConfig()


@dataclass(frozen=True)
class TracerConfig:
    """Configuration for the in-process tracer.

    Attributes:
        output: Where the trace JSON is written on exit
        capture_stacks: Store the full formatted stack on every event
        project_root: Directory whose files count as user code
    """

    output: str = "trace.json"
    capture_stacks: bool = False
    project_root: str = field(default_factory=os.getcwd)

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        if not self.output:
            raise ValueError("output must not be empty")
        if os.path.isdir(self.output):
            raise ValueError(f"output is a directory: {self.output}")
        if not self.project_root:
            raise ValueError("project_root must not be empty")

    @classmethod
    def from_env(cls, **overrides: Any) -> "TracerConfig":
        """Build from ASYNC_DOCTOR_TRACE / _STACKS / _ROOT, then overrides."""
        values: dict[str, Any] = {}
        if os.environ.get(f"{ENV_PREFIX}TRACE"):
            values["output"] = os.environ[f"{ENV_PREFIX}TRACE"]
        stacks = os.environ.get(f"{ENV_PREFIX}STACKS")
        if stacks is not None:
            values["capture_stacks"] = _parse_bool(stacks)
        if os.environ.get(f"{ENV_PREFIX}ROOT"):
            values["project_root"] = os.environ[f"{ENV_PREFIX}ROOT"]
        values.update({k: v for k, v in overrides.items() if v is not None})
        try:
            return cls(**values)
        except (TypeError, ValueError) as e:
            raise ConfigurationError(f"Invalid tracer configuration: {e}")


def load_config(config_file: Optional[Path] = None, **overrides) -> AnalysisConfig:
    """Load configuration with auto-discovery and merging.

    Args:
        config_file: Optional explicit config file path
        **overrides: Direct overrides (typically from CLI flags); None values
            are ignored

    Returns:
        Validated AnalysisConfig instance

    Raises:
        ConfigurationError: If a config file is invalid or missing
    """
    merged: dict = {}

    project_config = Path.cwd() / "async-doctor.toml"
    if project_config.exists():
        try:
            merged.update(_load_toml_file(project_config))
        except Exception as e:
            raise ConfigurationError(f"Invalid project config '{project_config}': {e}")

    if config_file is not None:
        if not config_file.exists():
            raise ConfigurationError(f"Config file not found: {config_file}")
        try:
            merged.update(_load_toml_file(config_file))
        except Exception as e:
            raise ConfigurationError(f"Invalid config file '{config_file}': {e}")

    merged.update(_load_env_vars())
    merged.update({k: v for k, v in overrides.items() if v is not None})

    # TOML gives lists, the dataclass is frozen with tuples
    for key in ("extensions", "exclude_dirs"):
        if isinstance(merged.get(key), list):
            merged[key] = tuple(merged[key])

    try:
        return AnalysisConfig(**merged)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"Invalid configuration: {e}")


def _load_env_vars() -> dict[str, Any]:
    """Load configuration from ASYNC_DOCTOR_* environment variables.

    Supported environment variables:
        ASYNC_DOCTOR_WORKERS: int
        ASYNC_DOCTOR_MAX_FILE_SIZE_MB: float
        ASYNC_DOCTOR_REPORT_FILENAME: str

    Tuple fields are only configurable through TOML or CLI flags.
    """
    type_hints = get_type_hints(AnalysisConfig)
    result: dict[str, Any] = {}

    for field_name in AnalysisConfig.__dataclass_fields__:
        env_value = os.environ.get(f"{ENV_PREFIX}{field_name.upper()}")
        if env_value is None:
            continue

        type_hint = type_hints.get(field_name)
        args = getattr(type_hint, "__args__", ())
        if type(None) in args:
            type_hint = next(t for t in args if t is not type(None))
        try:
            if type_hint is int:
                result[field_name] = int(env_value)
            elif type_hint is float:
                result[field_name] = float(env_value)
            elif type_hint is str:
                result[field_name] = env_value
        except ValueError as e:
            raise ConfigurationError(f"Invalid {ENV_PREFIX}{field_name.upper()}: {e}")

    return result


def _parse_bool(value: str) -> bool:
    lower = value.strip().lower()
    if lower in ("true", "1", "yes", "on"):
        return True
    if lower in ("false", "0", "no", "off", ""):
        return False
    raise ConfigurationError(f"expected true/false, got '{value}'")


def _load_toml_file(path: Path) -> dict:
    """Load TOML file and return parsed dict."""
    try:
        import tomllib
    except ModuleNotFoundError:
        import tomli as tomllib  # type: ignore

    with open(path, "rb") as f:
        return tomllib.load(f)
