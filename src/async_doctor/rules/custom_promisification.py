"""Flag every hand-built ``new Promise(executor)``."""

from __future__ import annotations

from typing import TYPE_CHECKING, Iterator

from .base import Match, Rule, RuleContext, promise_executor

if TYPE_CHECKING:
    from tree_sitter import Node


class CustomPromisificationRule(Rule):
    name = "custom-promisification"
    message = "Avoid manual Promise construction; use async/await or built-in Promise APIs instead."
    node_types = frozenset({"new_expression"})

    def check(self, node: Node, ctx: RuleContext) -> Iterator[Match]:
        if promise_executor(node) is not None:
            yield Match(node)
