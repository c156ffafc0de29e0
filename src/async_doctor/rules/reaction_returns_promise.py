"""Flag ``.then/.catch/.finally`` callbacks that return ``Promise.resolve/reject``.

Inside a reaction the returned value already settles the derived promise,
so ``return Promise.resolve(x)`` is ``return x`` and ``return
Promise.reject(e)`` is ``throw e``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Iterator, Optional

from ..models import Fix
from .base import (
    FUNCTION_TYPES,
    INLINE_FUNCTION_TYPES,
    Match,
    Rule,
    RuleContext,
    call_arguments,
    first_expression,
    is_promise_static,
    is_reaction_call,
    unwrap_parens,
)

if TYPE_CHECKING:
    from tree_sitter import Node


def settle_method(call: Optional[Node]) -> Optional[str]:
    for method in ("resolve", "reject"):
        if is_promise_static(call, method):
            return method
    return None


class ReactionReturnsPromiseRule(Rule):
    name = "reaction-returns-promise"
    message = (
        "Return the value (for resolve) or throw the error (for reject) "
        "instead of wrapping with Promise.resolve/reject."
    )
    node_types = frozenset({"return_statement", "arrow_function"})
    fixable = True

    def check(self, node: Node, ctx: RuleContext) -> Iterator[Match]:
        if node.type == "return_statement":
            yield from self._check_return(node, ctx)
        else:
            yield from self._check_arrow(node, ctx)

    def _inner_text(self, call: Node, ctx: RuleContext) -> str:
        args = call_arguments(call)
        return ctx.text(args[0]) if args else "undefined"

    def _check_return(self, node: Node, ctx: RuleContext) -> Iterator[Match]:
        call = first_expression(node)
        method = settle_method(call)
        if method is None:
            return

        index = ctx.nearest_index(FUNCTION_TYPES)
        if index is None or index < 2:
            return
        func = ctx.ancestors[index]
        if func.type not in INLINE_FUNCTION_TYPES:
            return
        if ctx.ancestors[index - 1].type != "arguments" or not is_reaction_call(ctx.ancestors[index - 2]):
            return

        inner = self._inner_text(call, ctx)
        keyword = "return" if method == "resolve" else "throw"
        yield Match(call, Fix(node.start_byte, node.end_byte, f"{keyword} {inner};"))

    def _check_arrow(self, node: Node, ctx: RuleContext) -> Iterator[Match]:
        parent, grandparent = ctx.parent(1), ctx.parent(2)
        if parent is None or parent.type != "arguments" or not is_reaction_call(grandparent):
            return

        body = node.child_by_field_name("body")
        if body is None or body.type == "statement_block":
            return
        call = unwrap_parens(body)
        method = settle_method(call)
        if method is None:
            return

        inner = self._inner_text(call, ctx)
        if method == "resolve":
            fix = Fix(call.start_byte, call.end_byte, inner)
        else:
            # A throw needs a statement, so the expression body becomes a block.
            fix = Fix(body.start_byte, body.end_byte, f"{{ throw {inner}; }}")
        yield Match(call, fix)
