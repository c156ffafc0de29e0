"""Flush the trace on normal exit, SIGINT and SIGTERM."""

from __future__ import annotations

import atexit
import os
import signal
from typing import Any, Callable

_SIGNALS = (signal.SIGINT, signal.SIGTERM)


class ExitHooks:
    """Runs ``flush`` on every exit path, then lets the exit proceed.

    The flush callable must be idempotent; several hooks may fire for one
    process exit (a signal handler followed by atexit, for instance).
    """

    def __init__(self, flush: Callable[[], Any]) -> None:
        self._flush = flush
        self._previous: dict[int, Any] = {}
        self._installed = False

    def install(self) -> None:
        if self._installed:
            return
        self._installed = True
        atexit.register(self._on_exit)
        for signum in _SIGNALS:
            try:
                self._previous[signum] = signal.getsignal(signum)
                signal.signal(signum, self._on_signal)
            except (OSError, ValueError):
                # Not in the main thread; atexit still covers normal exit.
                self._previous.pop(signum, None)

    def uninstall(self) -> None:
        if not self._installed:
            return
        self._installed = False
        atexit.unregister(self._on_exit)
        for signum, previous in self._previous.items():
            try:
                signal.signal(signum, previous if previous is not None else signal.SIG_DFL)
            except (OSError, ValueError):
                pass
        self._previous = {}

    def _on_exit(self) -> None:
        self._run_flush()

    def _run_flush(self) -> None:
        try:
            self._flush()
        except Exception:
            pass  # flush reports its own failures; the exit must go on

    def _on_signal(self, signum: int, frame: Any) -> None:
        # Flush only where the process dies without running atexit.
        previous = self._previous.get(signum, signal.SIG_DFL)
        if callable(previous):
            previous(signum, frame)
            return
        if previous == signal.SIG_IGN:
            return
        if signum == signal.SIGINT:
            raise KeyboardInterrupt
        # Re-deliver with the default disposition so the exit status is 128+signum.
        self._run_flush()
        signal.signal(signum, signal.SIG_DFL)
        os.kill(os.getpid(), signum)
