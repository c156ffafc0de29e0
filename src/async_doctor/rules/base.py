"""Rule protocol and the tree-shape helpers shared by all rules.

A rule is stateless: it declares the node types it cares about and, for
each such node, inspects the node together with the explicit ancestor
stack handed to it by the engine. It never follows parent pointers.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterable, Iterator, Optional, Sequence

from ..models import Fix

if TYPE_CHECKING:
    from tree_sitter import Node

FUNCTION_TYPES = frozenset(
    {
        "function_declaration",
        "function_expression",
        "function",
        "arrow_function",
        "method_definition",
        "generator_function_declaration",
        "generator_function",
        # Python
        "function_definition",
        "lambda",
    }
)

JS_LANGUAGES = frozenset({"javascript", "typescript", "tsx"})

# Functions that can appear inline as an argument (executors, callbacks).
INLINE_FUNCTION_TYPES = frozenset({"function_expression", "function", "arrow_function"})

REACTION_METHODS = frozenset({"then", "catch", "finally"})


@dataclass(frozen=True)
class Match:
    """A rule verdict: the node to report and an optional fix."""

    node: Node
    fix: Optional[Fix] = None


@dataclass(frozen=True)
class RuleContext:
    """What a rule may look at besides the node itself.

    Attributes:
        source: The exact bytes the tree was parsed from
        ancestors: Root-first chain of the node's ancestors (node excluded)
    """

    source: bytes
    ancestors: Sequence[Node]

    def text(self, node: Node) -> str:
        """Exact source text of ``node``."""
        return self.source[node.start_byte : node.end_byte].decode("utf-8", errors="replace")

    def parent(self, depth: int = 1) -> Optional[Node]:
        """Ancestor ``depth`` levels up (1 = parent)."""
        if depth <= len(self.ancestors):
            return self.ancestors[-depth]
        return None

    def nearest_index(self, types: Iterable[str]) -> Optional[int]:
        """Index into ``ancestors`` of the nearest ancestor of one of ``types``."""
        wanted = frozenset(types)
        for index in range(len(self.ancestors) - 1, -1, -1):
            if self.ancestors[index].type in wanted:
                return index
        return None

    def enclosing_function(self) -> Optional[Node]:
        index = self.nearest_index(FUNCTION_TYPES)
        return self.ancestors[index] if index is not None else None

    def within_function(self) -> list[Node]:
        """Ancestors between the nearest enclosing function and the node, innermost first."""
        chain: list[Node] = []
        for ancestor in reversed(self.ancestors):
            if ancestor.type in FUNCTION_TYPES:
                break
            chain.append(ancestor)
        return chain


class Rule(ABC):
    """Base class for an anti-pattern matcher.

    Subclasses set the class attributes and implement :meth:`check`.
    """

    name: str = ""
    message: str = ""
    node_types: frozenset[str] = frozenset()
    # Grammars whose trees this rule understands.
    languages: frozenset[str] = JS_LANGUAGES
    fixable: bool = False

    @abstractmethod
    def check(self, node: Node, ctx: RuleContext) -> Iterator[Match]:
        """Yield a Match for every violation rooted at ``node``."""

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} {self.name}>"


# ── Node helpers ─────────────────────────────────────────────


def named(node: Optional[Node]) -> list[Node]:
    """Named children without comments."""
    if node is None:
        return []
    return [child for child in node.named_children if child.type != "comment"]


def unwrap_parens(node: Optional[Node]) -> Optional[Node]:
    while node is not None and node.type == "parenthesized_expression":
        inner = named(node)
        if not inner:
            return node
        node = inner[0]
    return node


def is_identifier(node: Optional[Node], name: Optional[str] = None) -> bool:
    if node is None or node.type != "identifier":
        return False
    return name is None or node_text(node) == name


def node_text(node: Node) -> str:
    return node.text.decode("utf-8", errors="replace") if node.text is not None else ""


def is_async(node: Node) -> bool:
    return any(child.type == "async" for child in node.children)


def call_arguments(call: Node) -> list[Node]:
    return named(call.child_by_field_name("arguments"))


def member_property(node: Optional[Node]) -> Optional[str]:
    """Name of a non-computed member access, e.g. ``then`` for ``p.then``."""
    if node is None or node.type != "member_expression":
        return None
    prop = node.child_by_field_name("property")
    if prop is None or prop.type not in ("property_identifier", "private_property_identifier"):
        return None
    return node_text(prop)


def member_object(node: Node) -> Optional[Node]:
    return node.child_by_field_name("object")


def is_promise_static(call: Optional[Node], method: str) -> bool:
    """True for ``Promise.<method>(...)``."""
    if call is None or call.type != "call_expression":
        return False
    callee = call.child_by_field_name("function")
    if member_property(callee) != method:
        return False
    return is_identifier(member_object(callee), "Promise")


def is_reaction_call(call: Optional[Node]) -> bool:
    """True for ``x.then(...)``, ``x.catch(...)`` and ``x.finally(...)``."""
    if call is None or call.type != "call_expression":
        return False
    return member_property(call.child_by_field_name("function")) in REACTION_METHODS


def promise_executor(node: Node) -> Optional[Node]:
    """Inline executor of ``new Promise(<fn>)``, or None."""
    if node.type != "new_expression":
        return None
    if not is_identifier(node.child_by_field_name("constructor"), "Promise"):
        return None
    args = named(node.child_by_field_name("arguments"))
    if len(args) != 1 or args[0].type not in INLINE_FUNCTION_TYPES:
        return None
    return args[0]


def param_nodes(func: Node) -> list[Node]:
    single = func.child_by_field_name("parameter")
    if single is not None:
        return [single]
    return named(func.child_by_field_name("parameters"))


def param_names(func: Node) -> list[Optional[str]]:
    """Plain identifier parameter names; None for patterns and defaults."""
    names: list[Optional[str]] = []
    for param in param_nodes(func):
        if param.type in ("required_parameter", "optional_parameter"):
            param = param.child_by_field_name("pattern") or param
        names.append(node_text(param) if param.type == "identifier" else None)
    return names


def body_statements(func: Node) -> Optional[list[Node]]:
    """Statements of a block body, or None for an expression-bodied arrow."""
    body = func.child_by_field_name("body")
    if body is None or body.type != "statement_block":
        return None
    return named(body)


def sole_expression(func: Node) -> Optional[Node]:
    """The only thing an executor does, if it does exactly one expression."""
    body = func.child_by_field_name("body")
    if body is None:
        return None
    if body.type != "statement_block":
        return unwrap_parens(body)
    statements = named(body)
    if len(statements) != 1 or statements[0].type != "expression_statement":
        return None
    exprs = named(statements[0])
    return unwrap_parens(exprs[0]) if exprs else None


def first_expression(node: Node) -> Optional[Node]:
    exprs = named(node)
    return unwrap_parens(exprs[0]) if exprs else None
