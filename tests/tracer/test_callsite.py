"""Tests for call-site attribution."""

import os
from pathlib import Path

from async_doctor.tracer import IO, LIBRARY, USER, CallSiteResolver

HERE = Path(os.path.abspath(__file__))


class TestClassify:
    def test_origins(self, tmp_path):
        resolver = CallSiteResolver(str(tmp_path))
        root = str(tmp_path).replace(os.sep, "/")
        assert resolver.classify(f"{root}/src/app.py") == USER
        assert resolver.classify(f"{root}/.venv/lib/python3.12/site-packages/aiohttp/client.py") == LIBRARY
        assert resolver.classify("/usr/lib/python3.12/socket.py") == IO
        assert resolver.classify("/usr/lib/python3.12/urllib/request.py") == IO
        assert resolver.classify("/elsewhere/tool.py") == LIBRARY

    def test_project_under_io_named_directory_is_user(self, tmp_path):
        root = tmp_path / "srv" / "http" / "app"
        resolver = CallSiteResolver(str(root))
        path = str(root / "main.py").replace(os.sep, "/")
        assert resolver.is_user(path)
        assert resolver.classify(path) == USER
        assert resolver.classify(str(root / "net" / "socket.py").replace(os.sep, "/")) == USER

    def test_sibling_directory_is_not_user(self, tmp_path):
        resolver = CallSiteResolver(str(tmp_path / "app"))
        assert resolver.classify(str(tmp_path / "app2" / "x.py").replace(os.sep, "/")) == LIBRARY

    def test_internal_frames(self):
        import asyncio

        resolver = CallSiteResolver("/")
        assert resolver.is_internal(asyncio.tasks.__file__)
        assert resolver.is_internal("<frozen importlib._bootstrap>")
        assert not resolver.is_internal(str(HERE))


class TestResolve:
    def test_current_frame_is_attributed_here(self):
        resolver = CallSiteResolver(str(HERE.parent))
        site = resolver.resolve()
        path, line = site.location.rsplit(":", 1)
        assert Path(path) == HERE
        assert int(line) > 0
        assert site.origin == USER
        assert site.stack is None

    def test_falls_back_to_first_non_internal_frame(self, tmp_path):
        """With no frame under the project root, the innermost candidate is kept."""
        resolver = CallSiteResolver(str(tmp_path))
        site = resolver.resolve()
        assert site.location.startswith(str(HERE).replace(os.sep, "/"))
        assert site.origin == LIBRARY

    def test_stack_capture(self):
        resolver = CallSiteResolver(str(HERE.parent), capture_stacks=True)
        site = resolver.resolve()
        assert "test_stack_capture" in site.stack
