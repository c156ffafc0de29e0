"""The tracer as one object, plus the process-wide attach/detach API."""

from __future__ import annotations

import threading
from pathlib import Path
from typing import Optional

from ..config import TracerConfig
from .callsite import CallSiteResolver
from .exit_hooks import ExitHooks
from .instrument import AsyncioInstrumentation
from .recorder import TraceRecorder


class Tracer:
    """Recorder, call-site resolver, loop hooks and exit hooks wired together.

    Usage:
        with Tracer(TracerConfig(output="trace.json")) as tracer:
            asyncio.run(main())
        # trace.json is written when the block exits
    """

    def __init__(self, config: Optional[TracerConfig] = None) -> None:
        self.config = config or TracerConfig.from_env()
        self.recorder = TraceRecorder(Path(self.config.output))
        self.resolver = CallSiteResolver(self.config.project_root, self.config.capture_stacks)
        self.instrumentation = AsyncioInstrumentation(self.recorder, self.resolver)
        self.exit_hooks = ExitHooks(self.recorder.flush)

    def start(self) -> "Tracer":
        self.instrumentation.install()
        self.exit_hooks.install()
        return self

    def stop(self, flush: bool = True) -> Optional[Path]:
        self.instrumentation.uninstall()
        self.exit_hooks.uninstall()
        return self.recorder.flush() if flush else None

    def __enter__(self) -> "Tracer":
        return self.start()

    def __exit__(self, *exc_info) -> None:
        self.stop()


_active: Optional[Tracer] = None
_active_lock = threading.Lock()


def attach(config: Optional[TracerConfig] = None) -> Tracer:
    """Start the process-wide tracer (a no-op if one is already running)."""
    global _active
    with _active_lock:
        if _active is None:
            _active = Tracer(config).start()
        return _active


def detach(flush: bool = True) -> Optional[Path]:
    """Stop the process-wide tracer and flush it."""
    global _active
    with _active_lock:
        tracer, _active = _active, None
    if tracer is None:
        return None
    return tracer.stop(flush=flush)


def active_tracer() -> Optional[Tracer]:
    return _active
