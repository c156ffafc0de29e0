"""Tests for StaticAnalyzer: discovery, ordering, ids and skips."""

import pytest

from async_doctor.analysis import StaticAnalyzer, build_report
from async_doctor.config import AnalysisConfig
from async_doctor.exceptions import FileAccessError
from async_doctor.models import Finding


def _finding(file, line, column=1, rule="await-in-loop"):
    return Finding(
        id=0,
        file=file,
        line=line,
        column=column,
        rule=rule,
        message="",
        fixable=False,
        func_start=line,
        func_snippet="x",
    )


class TestBuildReport:
    """Global sort then sequential ids."""

    def test_ids_follow_file_line_column_order(self):
        report = build_report(
            [_finding("b.js", 1), _finding("a.js", 9), _finding("a.js", 2, 7), _finding("a.js", 2, 3)]
        )
        assert [(f.id, f.file, f.line, f.column) for f in report.findings] == [
            (1, "a.js", 2, 3),
            (2, "a.js", 2, 7),
            (3, "a.js", 9, 1),
            (4, "b.js", 1, 1),
        ]

    def test_input_order_does_not_matter(self):
        items = [_finding("b.js", 1), _finding("a.js", 9), _finding("a.js", 2)]
        assert build_report(items) == build_report(list(reversed(items)))


class TestStaticAnalyzer:
    """End-to-end analysis of small projects on disk."""

    def test_sample_project_findings(self, sample_project):
        report = StaticAnalyzer().analyze(sample_project)
        assert [(f.id, f.file, f.rule, f.line) for f in report.findings] == [
            (1, "src/api.js", "async-function-awaited-return", 2),
            (2, "src/loader.js", "await-in-loop", 4),
        ]
        assert report.skipped == ()

    def test_reanalysis_is_identical(self, sample_project):
        analyzer = StaticAnalyzer()
        assert analyzer.analyze(sample_project) == analyzer.analyze(sample_project)

    def test_region_covers_finding(self, sample_project):
        for finding in StaticAnalyzer().analyze(sample_project).findings:
            assert finding.func_start <= finding.line <= finding.func_end
            assert len(finding.func_snippet.splitlines()) >= 1

    def test_parse_failure_is_skipped_not_fatal(self, make_project):
        root = make_project(
            {
                "good.js": "async function f(xs) { for (const x of xs) { await x; } }\n",
                "broken.js": "function ( {\n",
            }
        )
        report = StaticAnalyzer().analyze(root)
        assert [f.file for f in report.findings] == ["good.js"]
        assert [s.path for s in report.skipped] == ["broken.js"]
        assert report.skipped[0].reason.startswith("syntax error")

    def test_excluded_and_hidden_directories(self, make_project):
        loop = "async function f(xs) { for (const x of xs) { await x; } }\n"
        root = make_project(
            {
                "app.js": loop,
                "node_modules/lib/index.js": loop,
                ".cache/gen.js": loop,
                "notes.txt": loop,
            }
        )
        report = StaticAnalyzer().analyze(root)
        assert [f.file for f in report.findings] == ["app.js"]

    def test_parallel_and_sequential_agree(self, make_project):
        files = {
            f"pkg{i}/mod.js": f"async function f{i}(xs) {{\n  for (const x of xs) {{ await x; }}\n}}\n"
            for i in range(12)
        }
        root = make_project(files)
        sequential = StaticAnalyzer(AnalysisConfig(workers=1)).analyze(root)
        parallel = StaticAnalyzer(AnalysisConfig(workers=4)).analyze(root)
        assert sequential == parallel
        assert len(parallel.findings) == 12

    def test_typescript_and_tsx(self, make_project):
        root = make_project(
            {
                "a.ts": "async function f(): Promise<number> {\n  return await g();\n}\n",
                "b.tsx": "const C = () => <div>{Promise.resolve(1).then((v) => v)}</div>;\n",
            }
        )
        report = StaticAnalyzer().analyze(root)
        assert [(f.file, f.rule) for f in report.findings] == [
            ("a.ts", "async-function-awaited-return"),
            ("b.tsx", "promise-resolve-then"),
        ]

    def test_column_counts_characters(self, analyze_js):
        """Columns are 1-based characters even after multi-byte text."""
        findings = analyze_js('async function f() { const s = "é"; return await g(); }\n')
        assert findings[0].column == 44

    def test_missing_root_raises(self, tmp_path):
        with pytest.raises(FileAccessError):
            StaticAnalyzer().analyze(tmp_path / "nope")
