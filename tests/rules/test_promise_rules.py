"""Tests for promise-resolve-then, executor-one-arg-used and custom-promisification."""

from async_doctor.rules import (
    CustomPromisificationRule,
    ExecutorOneArgUsedRule,
    PromiseResolveThenRule,
)


class TestPromiseResolveThen:
    """``Promise.resolve(x).then(...)`` chains."""

    def test_flags_chain(self, analyze_js):
        findings = analyze_js("Promise.resolve(1).then((v) => v + 1);\n", PromiseResolveThenRule)
        assert len(findings) == 1
        assert (findings[0].line, findings[0].column) == (1, 1)
        assert findings[0].fixable is False

    def test_only_the_first_then_is_flagged(self, analyze_js):
        """Later links in the chain hang off a then, not off Promise.resolve."""
        findings = analyze_js(
            "Promise.resolve().then(a).then(b);\n",
            PromiseResolveThenRule,
        )
        assert len(findings) == 1

    def test_other_receivers_are_fine(self, analyze_js):
        findings = analyze_js(
            "fetch(url).then(parse);\nPromise.all(xs).then(done);\nPromise.resolve(1);\n",
            PromiseResolveThenRule,
        )
        assert findings == []


class TestExecutorOneArgUsed:
    """Executors that never call one of their completion callables."""

    def test_single_parameter_executor(self, analyze_js):
        findings = analyze_js(
            "const wait = new Promise((resolve) => setTimeout(resolve, 10));\n",
            ExecutorOneArgUsedRule,
        )
        assert len(findings) == 1
        assert findings[0].column == 26

    def test_reject_declared_but_unused(self, analyze_js):
        findings = analyze_js(
            """
            const p = new Promise(function (resolve, reject) {
              resolve(42);
            });
            """,
            ExecutorOneArgUsedRule,
        )
        assert len(findings) == 1

    def test_both_used(self, analyze_js):
        findings = analyze_js(
            """
            const p = new Promise((resolve, reject) => {
              fs.readFile(path, (err, data) => (err ? reject(err) : resolve(data)));
            });
            """,
            ExecutorOneArgUsedRule,
        )
        assert findings == []

    def test_shadowed_name_does_not_count(self, analyze_js):
        """A nested function's own ``reject`` parameter is a different variable."""
        findings = analyze_js(
            """
            const p = new Promise((resolve, reject) => {
              onError((reject) => reject());
              resolve();
            });
            """,
            ExecutorOneArgUsedRule,
        )
        assert len(findings) == 1

    def test_shorthand_property_counts_as_use(self, analyze_js):
        findings = analyze_js(
            """
            const p = new Promise((resolve, reject) => {
              register({ resolve, reject });
            });
            """,
            ExecutorOneArgUsedRule,
        )
        assert findings == []


class TestCustomPromisification:
    """Every inline-executor ``new Promise``."""

    def test_flags_new_promise(self, analyze_js):
        findings = analyze_js(
            "function later() {\n  return new Promise((res) => setTimeout(res, 5));\n}\n",
            CustomPromisificationRule,
        )
        assert len(findings) == 1
        assert (findings[0].line, findings[0].column) == (2, 10)
        assert findings[0].func_start == 1

    def test_executor_passed_by_reference_is_not_flagged(self, analyze_js):
        findings = analyze_js("const p = new Promise(executor);\n", CustomPromisificationRule)
        assert findings == []

    def test_other_constructors_are_fine(self, analyze_js):
        findings = analyze_js("const m = new Map(() => 1);\n", CustomPromisificationRule)
        assert findings == []

    def test_typescript_generic_constructor(self, analyze_js):
        findings = analyze_js(
            "const p = new Promise<void>((resolve) => resolve());\n",
            CustomPromisificationRule,
            language="typescript",
            filename="sample.ts",
        )
        assert len(findings) == 1
