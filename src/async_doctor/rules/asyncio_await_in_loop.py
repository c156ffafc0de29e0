"""Flag ``await`` inside Python loops, the asyncio form of await-in-loop.

``async for`` and async comprehensions are the awaited-iteration forms and
are exempt, as is any part of a loop evaluated once (the iterable of a
``for``, the ``else`` clause).
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Iterator

from .base import FUNCTION_TYPES, Match, Rule, RuleContext

if TYPE_CHECKING:
    from tree_sitter import Node

PY_LOOP_TYPES = frozenset({"for_statement", "while_statement"})

COMPREHENSION_TYPES = frozenset(
    {"list_comprehension", "set_comprehension", "dictionary_comprehension", "generator_expression"}
)


def is_async_loop(loop: Node) -> bool:
    if loop.type in COMPREHENSION_TYPES:
        return any(
            child.type == "for_in_clause" and any(c.type == "async" for c in child.children)
            for child in loop.named_children
        )
    return any(child.type == "async" for child in loop.children)


def repeats(loop: Node, child: Node) -> bool:
    """True when ``child`` of ``loop`` runs once per iteration."""
    if loop.type in COMPREHENSION_TYPES:
        # Only the outermost iterable is evaluated once.
        clauses = [c for c in loop.named_children if c.type == "for_in_clause"]
        return not clauses or child != clauses[0]
    if child == loop.child_by_field_name("alternative"):
        return False
    if loop.type == "for_statement":
        return child != loop.child_by_field_name("right")
    return True


class AsyncioAwaitInLoopRule(Rule):
    name = "await-in-loop"
    message = (
        "Avoid using 'await' inside a loop; it serializes loop iterations. "
        "Schedule independent calls together with asyncio.gather()."
    )
    node_types = frozenset({"await"})
    languages = frozenset({"python"})

    def check(self, node: Node, ctx: RuleContext) -> Iterator[Match]:
        # The keyword token inside an await expression shares its type.
        if not node.is_named:
            return
        ancestors = ctx.ancestors
        for index in range(len(ancestors) - 1, -1, -1):
            ancestor = ancestors[index]
            if ancestor.type in FUNCTION_TYPES:
                return
            if ancestor.type not in PY_LOOP_TYPES and ancestor.type not in COMPREHENSION_TYPES:
                continue
            if is_async_loop(ancestor):
                continue
            child = ancestors[index + 1] if index + 1 < len(ancestors) else node
            if repeats(ancestor, child):
                yield Match(node)
                return
