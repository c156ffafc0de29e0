"""Flag ``new Promise`` wrappers that only forward another promise."""

from __future__ import annotations

from typing import TYPE_CHECKING, Iterator, Optional

from ..models import Fix
from .base import (
    Match,
    Rule,
    RuleContext,
    call_arguments,
    is_identifier,
    member_object,
    member_property,
    param_names,
    promise_executor,
    sole_expression,
)

if TYPE_CHECKING:
    from tree_sitter import Node

# Argument shapes that are plausibly already a promise.
_FORWARDABLE_TYPES = frozenset({"identifier", "call_expression", "member_expression"})


def forwarded_source(executor: Node, ctx: RuleContext) -> Optional[str]:
    """Source text of the promise the executor forwards, or None.

    Recognizes ``inner.then(resolve, reject)`` and ``resolve(inner)`` as the
    executor's only statement.
    """
    params = param_names(executor)
    if not params or params[0] is None:
        return None
    call = sole_expression(executor)
    if call is None or call.type != "call_expression":
        return None

    callee = call.child_by_field_name("function")
    args = call_arguments(call)

    if member_property(callee) == "then":
        if (
            len(args) == 2
            and len(params) >= 2
            and params[1] is not None
            and is_identifier(args[0], params[0])
            and is_identifier(args[1], params[1])
        ):
            return ctx.text(member_object(callee))
        return None

    if is_identifier(callee, params[0]) and len(args) == 1 and args[0].type in _FORWARDABLE_TYPES:
        return ctx.text(args[0])
    return None


class RedundantNewPromiseWrapperRule(Rule):
    name = "redundant-new-promise-wrapper"
    message = "Redundant Promise wrapper; return/await the underlying promise directly."
    node_types = frozenset({"new_expression"})
    fixable = True

    def check(self, node: Node, ctx: RuleContext) -> Iterator[Match]:
        executor = promise_executor(node)
        if executor is None:
            return
        replacement = forwarded_source(executor, ctx)
        if replacement:
            yield Match(node, Fix(node.start_byte, node.end_byte, replacement))
