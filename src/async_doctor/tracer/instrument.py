"""Hook asyncio task and future creation.

``BaseEventLoop.create_task`` and ``BaseEventLoop.create_future`` are
wrapped for the lifetime of the tracer. Every object they return is
recorded; completion is observed with a done-callback and teardown with
``weakref.finalize``, whichever happens first.
"""

from __future__ import annotations

import asyncio
import threading
import weakref
from typing import Any, Callable, Optional

from ..logging_config import get_logger
from .callsite import CallSiteResolver
from .recorder import TraceRecorder

logger = get_logger(__name__)


class AsyncioInstrumentation:
    """Observes, never alters, the loop's tasks and futures."""

    def __init__(self, recorder: TraceRecorder, resolver: CallSiteResolver) -> None:
        self.recorder = recorder
        self.resolver = resolver
        self._ids: "weakref.WeakKeyDictionary[Any, int]" = weakref.WeakKeyDictionary()
        self._ids_lock = threading.Lock()
        self._originals: dict[str, Callable[..., Any]] = {}

    @property
    def installed(self) -> bool:
        return bool(self._originals)

    def install(self) -> None:
        if self._originals:
            return
        loop_cls = asyncio.BaseEventLoop
        original_task = loop_cls.create_task
        original_future = loop_cls.create_future
        self._originals = {"create_task": original_task, "create_future": original_future}
        instrumentation = self

        def create_task(loop, *args, **kwargs):
            task = original_task(loop, *args, **kwargs)
            instrumentation.track(task, "Task", loop)
            return task

        def create_future(loop):
            future = original_future(loop)
            instrumentation.track(future, "Future", loop)
            return future

        create_task.__wrapped__ = original_task  # type: ignore[attr-defined]
        create_future.__wrapped__ = original_future  # type: ignore[attr-defined]
        loop_cls.create_task = create_task  # type: ignore[method-assign]
        loop_cls.create_future = create_future  # type: ignore[method-assign]

    def uninstall(self) -> None:
        for name, original in self._originals.items():
            setattr(asyncio.BaseEventLoop, name, original)
        self._originals = {}

    def event_id(self, obj: Any) -> Optional[int]:
        with self._ids_lock:
            return self._ids.get(obj)

    def track(self, future: asyncio.Future, kind: str, loop: Optional[asyncio.AbstractEventLoop] = None) -> Optional[int]:
        """Record ``future`` and arrange for its end to be stamped."""
        try:
            trigger = None
            creator = asyncio.current_task(loop) if loop is not None else None
            if creator is not None:
                trigger = self.event_id(creator)

            site = self.resolver.resolve()
            event_id = self.recorder.record_creation(
                kind, trigger, site.location, site.origin, site.stack
            )
            if event_id is None:
                return None

            with self._ids_lock:
                self._ids[future] = event_id
            settle = self.recorder.settle
            finalizer = weakref.finalize(future, settle, event_id)
            finalizer.atexit = False

            def on_done(_f):
                finalizer.detach()
                settle(event_id)

            future.add_done_callback(on_done)
            return event_id
        except Exception as e:
            logger.debug(f"Tracer failed to record {kind}: {e}")
            return None
