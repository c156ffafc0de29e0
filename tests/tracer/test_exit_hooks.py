"""Tests for flushing the trace on every exit path."""

import json
import os
import signal
import subprocess
import sys
import textwrap
from pathlib import Path

import pytest

from async_doctor.tracer import ExitHooks, TraceRecorder

SRC = Path(__file__).resolve().parents[2] / "src"

SCRIPT = textwrap.dedent(
    """
    import asyncio
    import os
    import signal
    import sys
    import time

    from async_doctor.config import TracerConfig
    from async_doctor.tracer import attach

    if sys.argv[2] == "ignored":
        signal.signal(signal.SIGINT, signal.SIG_IGN)

    attach(TracerConfig(output=sys.argv[1], project_root=os.path.dirname(os.path.abspath(__file__))))


    async def child(n):
        await asyncio.sleep(0.001)
        return n


    async def main():
        await asyncio.gather(*(asyncio.create_task(child(i)) for i in range(3)))


    asyncio.run(main())

    mode = sys.argv[2]
    if mode == "sigint":
        os.kill(os.getpid(), signal.SIGINT)
        time.sleep(5)
    elif mode == "sigterm":
        os.kill(os.getpid(), signal.SIGTERM)
        time.sleep(5)
    elif mode == "ignored":
        os.kill(os.getpid(), signal.SIGINT)
        time.sleep(0.05)
        asyncio.run(main())
    sys.exit(0)
    """
)


class TestExitHooksUnit:
    def test_exit_calls_flush(self):
        calls = []
        ExitHooks(lambda: calls.append("flush"))._on_exit()
        assert calls == ["flush"]

    def test_installed_handler_is_delegated_to_without_flushing(self):
        calls = []
        hooks = ExitHooks(lambda: calls.append("flush"))
        hooks._previous[signal.SIGTERM] = lambda signum, frame: calls.append(signum)
        hooks._on_signal(signal.SIGTERM, None)
        assert calls == [signal.SIGTERM]

    def test_default_sigint_raises_keyboard_interrupt(self):
        calls = []
        hooks = ExitHooks(lambda: calls.append("flush"))
        hooks._previous[signal.SIGINT] = signal.default_int_handler
        with pytest.raises(KeyboardInterrupt):
            hooks._on_signal(signal.SIGINT, None)
        assert calls == []

    def test_ignored_signal_keeps_recording(self, tmp_path):
        recorder = TraceRecorder(tmp_path / "t.json")
        hooks = ExitHooks(recorder.flush)
        hooks._previous[signal.SIGINT] = signal.SIG_IGN
        hooks._on_signal(signal.SIGINT, None)
        assert not recorder.frozen
        assert recorder.record_creation("Task") == 1

    def test_default_sigterm_flushes_before_redelivery(self, monkeypatch):
        calls = []
        monkeypatch.setattr(signal, "signal", lambda signum, handler: calls.append(("disposition", handler)))
        monkeypatch.setattr(os, "kill", lambda pid, signum: calls.append(("kill", signum)))
        hooks = ExitHooks(lambda: calls.append("flush"))
        hooks._previous[signal.SIGTERM] = signal.SIG_DFL
        hooks._on_signal(signal.SIGTERM, None)
        assert calls == ["flush", ("disposition", signal.SIG_DFL), ("kill", signal.SIGTERM)]

    def test_flush_errors_are_contained(self):
        def broken():
            raise OSError("disk full")

        ExitHooks(broken)._on_exit()

    def test_install_and_uninstall_restore_handlers(self):
        before = signal.getsignal(signal.SIGTERM)
        hooks = ExitHooks(lambda: None)
        hooks.install()
        assert signal.getsignal(signal.SIGTERM) == hooks._on_signal
        hooks.uninstall()
        assert signal.getsignal(signal.SIGTERM) == before


@pytest.mark.skipif(sys.platform == "win32", reason="POSIX signals")
class TestExitPaths:
    """A traced program writes exactly one trace however it ends."""

    def _run(self, tmp_path, mode):
        script = tmp_path / "app.py"
        script.write_text(SCRIPT)
        out = tmp_path / "trace.json"
        env = dict(os.environ)
        env["PYTHONPATH"] = os.pathsep.join(p for p in (str(SRC), env.get("PYTHONPATH")) if p)
        proc = subprocess.run(
            [sys.executable, str(script), str(out), mode],
            capture_output=True,
            text=True,
            env=env,
            timeout=60,
        )
        return proc, out

    @pytest.mark.parametrize("mode", ["exit", "sigint", "sigterm", "ignored"])
    def test_single_trace_per_exit_path(self, tmp_path, mode):
        proc, out = self._run(tmp_path, mode)

        assert proc.stderr.count("tracer: wrote") == 1
        events = json.loads(out.read_text())
        assert len(events) >= 4
        for event in events:
            if "end" in event:
                assert event["end"] >= event["start"]
        if mode in ("exit", "ignored"):
            assert proc.returncode == 0
        if mode == "sigterm":
            assert proc.returncode == -signal.SIGTERM

    def test_ignored_signal_does_not_cut_the_trace(self, tmp_path):
        _, out = self._run(tmp_path, "exit")
        single_run = len(json.loads(out.read_text()))

        proc, out = self._run(tmp_path, "ignored")
        assert proc.returncode == 0
        assert len(json.loads(out.read_text())) > single_run
