"""Attribute a task creation to a source location.

Walks the live call stack, skips runtime internals and the tracer itself,
and prefers the first frame inside the project over anything else.
"""

from __future__ import annotations

import asyncio
import concurrent.futures
import os
import re
import runpy
import sys
import threading
import traceback
from dataclasses import dataclass
from types import FrameType
from typing import Optional

USER = "user"
LIBRARY = "library"
IO = "io"

_DEPENDENCY_MARKERS = ("/site-packages/", "/dist-packages/", "/node_modules/")

# Standard-library modules whose frames mean the task was created for I/O.
_IO_PATTERN = re.compile(
    r"/(socket|ssl|selectors|subprocess|ftplib|smtplib|telnetlib)\.py$|/(http|urllib|xmlrpc)/"
)


def _norm(path: str) -> str:
    return os.path.abspath(path).replace("\\", "/")


def _package_dir(module) -> str:
    return _norm(os.path.dirname(module.__file__)) + "/"


@dataclass(frozen=True)
class CallSite:
    location: Optional[str] = None  # "/abs/file.py:12"
    origin: Optional[str] = None
    stack: Optional[str] = None


class CallSiteResolver:
    """Picks the frame a tracked task is attributed to.

    Args:
        project_root: Frames under this directory count as user code
        capture_stacks: Also keep the full formatted stack
    """

    def __init__(self, project_root: str, capture_stacks: bool = False) -> None:
        self.project_root = _norm(project_root).rstrip("/") + "/"
        self.capture_stacks = capture_stacks
        self._skip_dirs = (
            _package_dir(asyncio),
            _package_dir(concurrent.futures),
            _norm(os.path.dirname(__file__)) + "/",
        )
        self._skip_files = frozenset(_norm(m.__file__) for m in (threading, runpy))

    def is_internal(self, filename: str) -> bool:
        if filename.startswith("<"):
            return True
        path = _norm(filename)
        return path in self._skip_files or path.startswith(self._skip_dirs)

    def is_dependency(self, path: str) -> bool:
        return any(marker in path for marker in _DEPENDENCY_MARKERS)

    def is_user(self, path: str) -> bool:
        return path.startswith(self.project_root) and not self.is_dependency(path)

    def classify(self, path: str) -> str:
        if self.is_user(path):
            return USER
        if self.is_dependency(path):
            return LIBRARY
        if _IO_PATTERN.search(path):
            return IO
        return LIBRARY

    def resolve(self, frame: Optional[FrameType] = None) -> CallSite:
        """Resolve the call site for the current (or given) stack."""
        frame = frame or sys._getframe(1)
        chosen: Optional[tuple[str, int]] = None

        current: Optional[FrameType] = frame
        while current is not None:
            filename = current.f_code.co_filename
            if not self.is_internal(filename):
                path = _norm(filename)
                if chosen is None:
                    chosen = (path, current.f_lineno)
                if self.is_user(path):
                    chosen = (path, current.f_lineno)
                    break
            current = current.f_back

        stack = "".join(traceback.format_stack(frame)) if self.capture_stacks else None
        if chosen is None:
            return CallSite(stack=stack)
        path, line = chosen
        return CallSite(location=f"{path}:{line}", origin=self.classify(path), stack=stack)
