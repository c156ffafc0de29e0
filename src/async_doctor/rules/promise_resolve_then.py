"""Flag ``Promise.resolve(x).then(...)`` chains."""

from __future__ import annotations

from typing import TYPE_CHECKING, Iterator

from .base import Match, Rule, RuleContext, is_promise_static, member_object, member_property, unwrap_parens

if TYPE_CHECKING:
    from tree_sitter import Node


class PromiseResolveThenRule(Rule):
    name = "promise-resolve-then"
    message = "Avoid using Promise.resolve().then(); use async/await or direct code instead."
    node_types = frozenset({"call_expression"})

    def check(self, node: Node, ctx: RuleContext) -> Iterator[Match]:
        callee = node.child_by_field_name("function")
        if member_property(callee) != "then":
            return
        if is_promise_static(unwrap_parens(member_object(callee)), "resolve"):
            yield Match(node)
