"""IndexBuilder: compiles a rule set into a layered index.

Each level of the index corresponds to one attribute of the attribute
order. A rule is inserted along every combination of values its selectors
allow and its code is recorded at the leaf(s) it reaches, so matching an
object walks O(depth) levels instead of scanning every rule.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from .errors import BuildDiagnostic, RuleError, UnknownAttributeError
from .nodes import InternalNode, LeafNode, NegativeBranch, Node
from .parsing import parse_rule
from .records import AttributeOrder, Rule
from .selectors import Negative, Positive, effective


class UnknownAttributePolicy(str, Enum):
    """What to do with a rule that constrains an attribute outside the order."""

    ignore = "ignore"   # attribute never consulted; rule indexed as if unconstrained there
    reject = "reject"   # rule skipped and reported


@dataclass(frozen=True)
class RuleIndex:
    """A built index: the root node and the attribute order it was built for."""

    root: Node
    attrs: AttributeOrder


@dataclass
class BuildResult:
    """Outcome of a build: the index plus per-rule diagnostics."""

    index: RuleIndex
    diagnostics: list[BuildDiagnostic] = field(default_factory=list)
    rules_indexed: int = 0
    codes: set[str] = field(default_factory=set)

    @property
    def root(self) -> Node:
        return self.index.root

    @property
    def rules_skipped(self) -> int:
        return len(self.diagnostics)


def as_attribute_order(attrs: AttributeOrder | Sequence[str] | str) -> AttributeOrder:
    if isinstance(attrs, AttributeOrder):
        return attrs
    return AttributeOrder(names=attrs)


def new_node(depth: int, attrs: AttributeOrder) -> Node:
    """Create the node shape required at ``depth``."""
    if depth == len(attrs):
        return LeafNode()
    return InternalNode()


class IndexBuilder:
    """Build a RuleIndex from rules; malformed rules are reported, not fatal."""

    def __init__(
        self,
        unknown_attribute_policy: UnknownAttributePolicy = UnknownAttributePolicy.ignore,
    ) -> None:
        self._policy = UnknownAttributePolicy(unknown_attribute_policy)

    @property
    def unknown_attribute_policy(self) -> UnknownAttributePolicy:
        return self._policy

    def build(
        self,
        rules: Iterable[Rule | dict[str, Any]],
        attrs: AttributeOrder | Sequence[str],
    ) -> BuildResult:
        order = as_attribute_order(attrs)
        root = new_node(0, order)
        result = BuildResult(index=RuleIndex(root=root, attrs=order))

        for i, record in enumerate(rules):
            try:
                rule = parse_rule(record, index=i)
                self._check_attributes(rule, order, i)
            except RuleError as exc:
                result.diagnostics.append(exc.to_diagnostic())
                continue
            insert_rule(root, rule, order)
            result.rules_indexed += 1
            result.codes.add(rule.code)

        return result

    def _check_attributes(self, rule: Rule, attrs: AttributeOrder, index: int) -> None:
        if self._policy is UnknownAttributePolicy.ignore:
            return
        unknown = rule.unknown_attributes(attrs)
        if unknown:
            raise UnknownAttributeError(
                f"rule constrains attributes not in the attribute order: {unknown}",
                code=rule.code,
                index=index,
            )


def insert_rule(root: Node, rule: Rule, attrs: AttributeOrder) -> None:
    """Insert ``rule`` below ``root`` along every path its selectors allow."""
    _insert(root, rule, attrs, 0)


def _insert(node: Node, rule: Rule, attrs: AttributeOrder, depth: int) -> None:
    # new_node only creates leaves at depth == len(attrs)
    if isinstance(node, LeafNode):
        node.codes.add(rule.code)
        return

    selector = effective(rule.selector_for(attrs[depth]))

    if isinstance(selector, Positive):
        for value in sorted(selector.values):
            child = node.branches.get(value)
            if child is None:
                child = node.branches[value] = new_node(depth + 1, attrs)
            _insert(child, rule, attrs, depth + 1)
    elif isinstance(selector, Negative):
        # one subtree per negative selector; excluded sets are independent filters
        branch = NegativeBranch(excluded=selector.values, child=new_node(depth + 1, attrs))
        node.negative.append(branch)
        _insert(branch.child, rule, attrs, depth + 1)
    else:
        if node.wildcard is None:
            node.wildcard = new_node(depth + 1, attrs)
        _insert(node.wildcard, rule, attrs, depth + 1)


def build_index(
    rules: Iterable[Rule | dict[str, Any]],
    attrs: AttributeOrder | Sequence[str],
    unknown_attribute_policy: UnknownAttributePolicy = UnknownAttributePolicy.ignore,
) -> BuildResult:
    """Convenience wrapper around ``IndexBuilder(...).build(...)``."""
    return IndexBuilder(unknown_attribute_policy).build(rules, attrs)
