"""Process-wide event store for tracked tasks.

Lifecycle: created when the tracer attaches, appended to by the loop
hooks, drained exactly once by :meth:`TraceRecorder.flush`, then frozen.
Each event moves Created -> Settled/TornDown once; the first transition
stamps ``end`` and every later one is ignored.
"""

from __future__ import annotations

import json
import threading
import time
from pathlib import Path
from typing import Callable, Optional

from ..logging_config import get_tracer_notice_logger
from ..models import PromiseEvent

notice = get_tracer_notice_logger()


class TraceRecorder:
    """Thread-safe store of :class:`PromiseEvent` records.

    Attributes:
        output: Where :meth:`flush` writes the JSON array
    """

    def __init__(self, output: Path, clock: Callable[[], float] = time.perf_counter) -> None:
        self.output = Path(output)
        self._clock = clock
        self._t0 = clock()
        # Reentrant: a teardown finalizer can run from a GC pass triggered
        # while this thread already holds the lock.
        self._lock = threading.RLock()
        self._events: dict[int, PromiseEvent] = {}
        self._next_id = 1
        self._frozen = False
        self._written: Optional[Path] = None

    def now(self) -> float:
        """Milliseconds since the recorder was created."""
        return (self._clock() - self._t0) * 1000.0

    @property
    def frozen(self) -> bool:
        return self._frozen

    def __len__(self) -> int:
        with self._lock:
            return len(self._events)

    def record_creation(
        self,
        kind: str,
        trigger_id: Optional[int] = None,
        location: Optional[str] = None,
        origin: Optional[str] = None,
        stack: Optional[str] = None,
    ) -> Optional[int]:
        """Register a new task and return its id (None once frozen)."""
        start = self.now()
        with self._lock:
            if self._frozen:
                return None
            event_id = self._next_id
            self._next_id += 1
            self._events[event_id] = PromiseEvent(
                id=event_id,
                trigger_id=trigger_id,
                type=kind,
                start=start,
                location=location,
                origin=origin,
                stack=stack,
            )
        return event_id

    def settle(self, event_id: int) -> bool:
        """Stamp ``end`` if not yet set. Returns True only for the first call."""
        end = self.now()
        with self._lock:
            if self._frozen:
                return False
            event = self._events.get(event_id)
            if event is None or event.end is not None:
                return False
            event.end = max(end, event.start)
            return True

    def events(self) -> list[PromiseEvent]:
        """Snapshot of all events ordered by creation time."""
        with self._lock:
            snapshot = list(self._events.values())
        snapshot.sort(key=lambda e: (e.start, e.id))
        return snapshot

    def flush(self) -> Optional[Path]:
        """Write all events to :attr:`output`, once.

        Safe to call from several exit hooks: later calls return the path
        written by the first one without touching the file. Never raises;
        failures are reported on stderr.
        """
        with self._lock:
            if self._frozen:
                return self._written
            self._frozen = True
            snapshot = list(self._events.values())

        snapshot.sort(key=lambda e: (e.start, e.id))
        try:
            self.output.parent.mkdir(parents=True, exist_ok=True)
            self.output.write_text(
                json.dumps([e.to_dict() for e in snapshot], indent=2), encoding="utf-8"
            )
        except Exception as e:  # the host's exit path must not see this
            notice.error(f"Async Doctor tracer: failed to write trace: {e}")
            return None

        self._written = self.output
        notice.info(f"Async Doctor tracer: wrote {len(snapshot)} events to {self.output}")
        return self._written
