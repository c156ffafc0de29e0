"""Run a Python program in-process under the tracer."""

from __future__ import annotations

import runpy
import sys
from typing import Optional, Sequence

from ..config import TracerConfig
from .session import attach, detach


def run_traced(
    target: str,
    args: Sequence[str] = (),
    module: bool = False,
    config: Optional[TracerConfig] = None,
) -> None:
    """Execute ``target`` as ``__main__`` with tracing enabled.

    Args:
        target: Script path, or module name when ``module`` is True
        args: Arguments the program sees in ``sys.argv[1:]``
        module: Run ``target`` like ``python -m``
        config: Tracer configuration (environment-derived by default)

    The trace is flushed when the program returns or raises, including
    ``SystemExit``; the exception is then re-raised unchanged.
    """
    saved_argv = sys.argv[:]
    sys.argv = [target, *args]
    attach(config)
    try:
        if module:
            runpy.run_module(target, run_name="__main__", alter_sys=True)
        else:
            runpy.run_path(target, run_name="__main__")
    finally:
        detach()
        sys.argv = saved_argv
