"""Flag ``return await x`` in async functions."""

from __future__ import annotations

from typing import TYPE_CHECKING, Iterator

from ..models import Fix
from .base import Match, Rule, RuleContext, first_expression, is_async, named

if TYPE_CHECKING:
    from tree_sitter import Node


class AsyncFunctionAwaitedReturnRule(Rule):
    name = "async-function-awaited-return"
    message = "Remove unnecessary 'await' in return; it adds extra microtask delay."
    node_types = frozenset({"return_statement"})
    fixable = True

    def check(self, node: Node, ctx: RuleContext) -> Iterator[Match]:
        argument = first_expression(node)
        if argument is None or argument.type != "await_expression":
            return

        func = ctx.enclosing_function()
        if func is None or not is_async(func):
            return

        # Dropping the await inside try/catch/finally changes which handler sees
        # the rejection, so the finding stands without a fix.
        if any(a.type == "try_statement" for a in ctx.within_function()):
            yield Match(argument)
            return

        operand = named(argument)
        if not operand:
            yield Match(argument)
            return
        yield Match(argument, Fix(argument.start_byte, operand[0].start_byte, ""))
