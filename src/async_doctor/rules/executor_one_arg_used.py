"""Flag Promise executors that never call one of resolve/reject."""

from __future__ import annotations

from typing import TYPE_CHECKING, Iterator

from .base import FUNCTION_TYPES, Match, Rule, RuleContext, node_text, param_names, promise_executor

if TYPE_CHECKING:
    from tree_sitter import Node

# Identifier-like node types that read a variable.
_REFERENCE_TYPES = frozenset({"identifier", "shorthand_property_identifier"})


def is_identifier_used(name: str, func: Node) -> bool:
    """True if ``name`` is referenced in ``func``'s body.

    Nested functions that redeclare ``name`` as a parameter are not searched.
    """
    body = func.child_by_field_name("body")
    if body is None:
        return False
    stack = [body]
    while stack:
        current = stack.pop()
        if current.type in FUNCTION_TYPES and current != func:
            if name in param_names(current):
                continue
        if current.type in _REFERENCE_TYPES and node_text(current) == name:
            return True
        stack.extend(current.children)
    return False


class ExecutorOneArgUsedRule(Rule):
    name = "executor-one-arg-used"
    message = (
        "Promise executor uses only one of its callbacks (resolve/reject), "
        "indicating incomplete handling."
    )
    node_types = frozenset({"new_expression"})

    def check(self, node: Node, ctx: RuleContext) -> Iterator[Match]:
        executor = promise_executor(node)
        if executor is None:
            return

        params = param_names(executor)
        resolve_name = params[0] if params else None
        reject_name = params[1] if len(params) > 1 else None
        uses_resolve = resolve_name is not None and is_identifier_used(resolve_name, executor)
        uses_reject = reject_name is not None and is_identifier_used(reject_name, executor)

        if len(params) < 2 or not (uses_resolve and uses_reject):
            yield Match(executor)
