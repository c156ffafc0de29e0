"""Reading trace captures and resolving their call-site locations."""

from __future__ import annotations

import json
import os
import re
from pathlib import Path
from typing import Any, Optional, Union

from ..exceptions import FileAccessError, TraceFormatError
from ..logging_config import get_logger
from ..models import PromiseEvent

logger = get_logger(__name__)

_LOCATION = re.compile(r"^(.*?):(\d+)(?::\d+)?$")


def events_from_data(data: Any) -> list[PromiseEvent]:
    """Extract events from a decoded trace document.

    Raises:
        TraceFormatError: If ``data`` is neither an array nor an object
            with an ``events`` array
    """
    if isinstance(data, dict) and isinstance(data.get("events"), list):
        items = data["events"]
    elif isinstance(data, list):
        items = data
    else:
        raise TraceFormatError(type(data).__name__)

    events = []
    for item in items:
        if not isinstance(item, dict):
            continue
        try:
            events.append(PromiseEvent.from_dict(item))
        except (TypeError, ValueError) as e:
            logger.debug(f"Dropping malformed trace event {item!r}: {e}")
    return events


def load_trace(path: Union[str, Path]) -> list[PromiseEvent]:
    """Load trace events from a JSON file.

    Raises:
        FileAccessError: If the trace file cannot be read or is not JSON
    """
    path = Path(path)
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise FileAccessError(path, str(e))
    except json.JSONDecodeError as e:
        raise FileAccessError(path, f"invalid JSON: {e}")
    return parse_trace(data)


def parse_trace(data: Any) -> list[PromiseEvent]:
    """Events of a decoded trace; a document of the wrong shape yields none."""
    try:
        return events_from_data(data)
    except TraceFormatError as e:
        logger.warning(f"{e.message}; treating it as an empty trace")
        return []


def parse_location(location: Optional[str]) -> Optional[tuple[str, int]]:
    """Split ``"path:line[:col]"`` into ``(path, line)``."""
    if not location:
        return None
    match = _LOCATION.match(location)
    if not match:
        return None
    return match.group(1), int(match.group(2))


def relative_location(path: str, root: Union[str, Path]) -> str:
    """Project-relative form of a trace path, with forward slashes.

    Absolute paths are made relative to ``root``; relative paths are
    assumed to be project-relative already.
    """
    if path.startswith("file://"):
        path = path[len("file://"):]
    if os.path.isabs(path):
        path = os.path.relpath(path, os.path.abspath(root))
    path = path.replace("\\", "/")
    while path.startswith("./"):
        path = path[2:]
    return path
