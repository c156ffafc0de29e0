"""Flag ``new Promise(async (resolve, reject) => ...)``."""

from __future__ import annotations

from typing import TYPE_CHECKING, Iterator, Optional

from ..models import Fix
from .base import Match, Rule, RuleContext, is_async, promise_executor

if TYPE_CHECKING:
    from tree_sitter import Node


def strip_async(func: Node) -> Optional[Fix]:
    """Remove the ``async`` keyword and the whitespace after it."""
    children = func.children
    for index, child in enumerate(children):
        if child.type == "async":
            end = children[index + 1].start_byte if index + 1 < len(children) else child.end_byte
            return Fix(child.start_byte, end, "")
    return None


class AsyncExecutorInPromiseRule(Rule):
    name = "async-executor-in-promise"
    message = (
        "Avoid using an async Promise executor; it can cause unhandled rejections. "
        "Use a synchronous executor and call resolve/reject."
    )
    node_types = frozenset({"new_expression"})
    fixable = True

    def check(self, node: Node, ctx: RuleContext) -> Iterator[Match]:
        executor = promise_executor(node)
        if executor is not None and is_async(executor):
            yield Match(executor, strip_async(executor))
