"""Shared test fixtures for Async Doctor tests."""

import textwrap
from pathlib import Path

import pytest

from async_doctor.analysis import StaticAnalyzer
from async_doctor.rules import default_rules


def dedent(code: str) -> str:
    return textwrap.dedent(code).lstrip("\n")


@pytest.fixture
def analyze_js():
    """Run rules over an in-memory snippet and return its findings.

    Usage: ``analyze_js(code, rule_cls=None, language="javascript")``.
    """

    def _run(code, rule_cls=None, language="javascript", filename="sample.js"):
        rules = [rule_cls()] if rule_cls is not None else default_rules()
        analyzer = StaticAnalyzer(rules=rules)
        return analyzer.analyze_source(dedent(code).encode("utf-8"), filename, language)

    return _run


@pytest.fixture
def make_project(tmp_path):
    """Write ``{relative_path: source}`` under a fresh project directory."""

    def _make(files, name="project"):
        root = tmp_path / name
        root.mkdir(parents=True, exist_ok=True)
        for rel, code in files.items():
            path = root / rel
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(dedent(code), encoding="utf-8")
        return root

    return _make


SAMPLE_PROJECT = {
    "src/loader.js": """
        async function loadAll(ids) {
          const out = [];
          for (const id of ids) {
            out.push(await fetchItem(id));
          }
          return out;
        }
    """,
    "src/api.js": """
        async function getUser(id) {
          return await db.find(id);
        }

        module.exports = { getUser };
    """,
    "src/clean.ts": """
        export async function total(items: number[]): Promise<number> {
          const values = await Promise.all(items.map(async (n) => n * 2));
          return values.reduce((a, b) => a + b, 0);
        }
    """,
}


@pytest.fixture
def sample_project(make_project) -> Path:
    """A small project with one await-in-loop and one awaited return."""
    return make_project(SAMPLE_PROJECT)
