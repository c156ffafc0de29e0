"""Rule engine: one depth-first traversal per file, all rules per node.

Rules register the node types they care about. The traversal keeps an
explicit ancestor stack and hands a snapshot of it to every interested
rule, so no rule ever depends on parent pointers or on another rule.
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional, Sequence

from ..logging_config import get_logger
from ..models import Fix
from ..rules import Rule, RuleContext, default_rules
from ..rules.base import FUNCTION_TYPES

if TYPE_CHECKING:
    from tree_sitter import Node, Tree

logger = get_logger(__name__)


@dataclass(frozen=True)
class EngineMatch:
    """A rule hit before it becomes a Finding.

    ``region`` is the nearest function around the reported node, or the
    top-level statement holding it when there is no function.
    """

    rule: Rule
    node: Node
    fix: Optional[Fix]
    region: Node


def _descend(start: Node, target: Node) -> list[Node]:
    """Nodes strictly between ``start`` and ``target``, outermost first."""
    path: list[Node] = []
    current = start
    while current != target:
        step = None
        for child in current.children:
            if child == target:
                return path
            if child.start_byte <= target.start_byte and target.end_byte <= child.end_byte:
                step = child
                break
        if step is None:
            break
        path.append(step)
        current = step
    return path


def _region(path: Sequence[Node]) -> Node:
    """Enclosing function of ``path[-1]``, else its top-level statement."""
    for node in reversed(path[:-1]):
        if node.type in FUNCTION_TYPES:
            return node
    return path[1] if len(path) > 1 else path[0]


class RuleEngine:
    """Dispatches every node of a tree to the rules interested in its type."""

    def __init__(self, rules: Optional[Sequence[Rule]] = None) -> None:
        self.rules: list[Rule] = list(rules) if rules is not None else default_rules()
        self._dispatch: dict[str, list[Rule]] = defaultdict(list)
        for rule in self.rules:
            for node_type in rule.node_types:
                self._dispatch[node_type].append(rule)
        self._by_language: dict[str, dict[str, list[Rule]]] = {}

    def dispatch_for(self, language: str) -> dict[str, list[Rule]]:
        """Node type to interested rules, restricted to ``language``."""
        table = self._by_language.get(language)
        if table is None:
            table = {}
            for node_type, rules in self._dispatch.items():
                scoped = [rule for rule in rules if language in rule.languages]
                if scoped:
                    table[node_type] = scoped
            self._by_language[language] = table
        return table

    def run(self, tree: Tree, source: bytes, language: str = "javascript") -> list[EngineMatch]:
        """Walk ``tree`` once and collect every rule match.

        Args:
            tree: Parsed syntax tree
            source: The bytes ``tree`` was parsed from
            language: Grammar ``tree`` was parsed with; picks the rules

        Returns:
            Matches in traversal order
        """
        dispatch = self.dispatch_for(language)
        matches: list[EngineMatch] = []
        ancestors: list[Node] = []
        stack = [iter([tree.root_node])]

        while stack:
            node = next(stack[-1], None)
            if node is None:
                stack.pop()
                if ancestors:
                    ancestors.pop()
                continue

            interested = dispatch.get(node.type)
            if interested:
                ctx = RuleContext(source=source, ancestors=tuple(ancestors))
                for rule in interested:
                    matches.extend(self._evaluate(rule, node, ctx))

            ancestors.append(node)
            stack.append(iter(node.children))

        return matches

    def _evaluate(self, rule: Rule, node: Node, ctx: RuleContext) -> list[EngineMatch]:
        try:
            hits = list(rule.check(node, ctx))
        except Exception as e:
            # A failing rule counts as "no match" for this node only.
            logger.debug(f"Rule {rule.name} failed at {node.start_point}: {e}")
            return []

        results = []
        for hit in hits:
            if hit.node == node:
                path = [*ctx.ancestors, node]
            else:
                path = [*ctx.ancestors, node, *_descend(node, hit.node), hit.node]
            results.append(EngineMatch(rule=rule, node=hit.node, fix=hit.fix, region=_region(path)))
        return results
