"""Flag ``await`` inside loop bodies that serialize independent iterations."""

from __future__ import annotations

from typing import TYPE_CHECKING, Iterator

from .base import FUNCTION_TYPES, Match, Rule, RuleContext

if TYPE_CHECKING:
    from tree_sitter import Node

LOOP_TYPES = frozenset(
    {"for_statement", "for_in_statement", "while_statement", "do_statement"}
)


def is_for_await(loop: Node) -> bool:
    return loop.type == "for_in_statement" and any(c.type == "await" for c in loop.children)


def in_loop_header(loop: Node, child: Node) -> bool:
    """True when ``child`` is the part of ``loop`` evaluated only once."""
    if loop.type == "for_in_statement":
        return child == loop.child_by_field_name("right")
    if loop.type == "for_statement":
        return child == loop.child_by_field_name("initializer")
    return False


class AwaitInLoopRule(Rule):
    name = "await-in-loop"
    message = "Avoid using 'await' inside a loop; it serializes loop iterations."
    node_types = frozenset({"await_expression"})

    def check(self, node: Node, ctx: RuleContext) -> Iterator[Match]:
        ancestors = ctx.ancestors
        for index in range(len(ancestors) - 1, -1, -1):
            ancestor = ancestors[index]
            if ancestor.type in FUNCTION_TYPES:
                return
            if ancestor.type not in LOOP_TYPES or is_for_await(ancestor):
                continue
            child = ancestors[index + 1] if index + 1 < len(ancestors) else node
            if in_loop_header(ancestor, child):
                continue
            yield Match(node)
            return
