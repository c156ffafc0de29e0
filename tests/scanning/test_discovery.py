"""Tests for source discovery."""

from async_doctor.config import AnalysisConfig
from async_doctor.scanning import discover_files


class TestDiscoverFiles:
    """Directory walk filtering."""

    def test_filters_by_extension_and_sorts(self, make_project):
        root = make_project(
            {
                "b.ts": "",
                "a.js": "",
                "nested/c.tsx": "",
                "readme.md": "",
                "style.css": "",
            }
        )
        found = [p.relative_to(root).as_posix() for p in discover_files(root)]
        assert found == ["a.js", "b.ts", "nested/c.tsx"]

    def test_prunes_dependency_and_hidden_dirs(self, make_project):
        root = make_project(
            {
                "app.js": "",
                "node_modules/lib/index.js": "",
                "bower_components/x.js": "",
                ".cache/gen.js": "",
                "__pycache__/mod.py": "",
                "venv/lib/site.py": "",
                "worker.py": "",
            }
        )
        found = [p.relative_to(root).as_posix() for p in discover_files(root)]
        assert found == ["app.js", "worker.py"]

    def test_respects_configured_extensions(self, make_project):
        root = make_project({"a.js": "", "b.ts": ""})
        config = AnalysisConfig(extensions=(".ts",))
        found = [p.name for p in discover_files(root, config)]
        assert found == ["b.ts"]

    def test_skips_files_over_size_limit(self, make_project):
        root = make_project({"small.js": "x;\n"})
        (root / "big.js").write_text("x;\n" * 400_000, encoding="utf-8")
        config = AnalysisConfig(max_file_size_mb=0.5)
        found = [p.name for p in discover_files(root, config)]
        assert found == ["small.js"]

    def test_returns_absolute_paths(self, make_project):
        root = make_project({"a.js": ""})
        (path,) = discover_files(root)
        assert path.is_absolute()

    def test_empty_directory(self, tmp_path):
        assert discover_files(tmp_path) == []
