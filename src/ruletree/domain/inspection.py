"""Diagnostic views of a built index (JSON dump and size statistics)."""

from __future__ import annotations

from typing import Any

from .index_builder import RuleIndex
from .nodes import LeafNode, Node
from .records import AttributeOrder


def dump_index(index: RuleIndex) -> dict[str, Any]:
    """Return a JSON-serializable nested dict of the index.

    Keys and code lists are sorted so dumps of equal indexes compare equal.
    """
    return _dump(index.root, index.attrs, 0)


def _dump(node: Node, attrs: AttributeOrder, depth: int) -> dict[str, Any]:
    if isinstance(node, LeafNode):
        return {"codes": sorted(node.codes)}
    out: dict[str, Any] = {"attribute": attrs[depth]}
    if node.branches:
        out["branches"] = {
            value: _dump(child, attrs, depth + 1) for value, child in sorted(node.branches.items())
        }
    if node.wildcard is not None:
        out["wildcard"] = _dump(node.wildcard, attrs, depth + 1)
    if node.negative:
        out["negative"] = [
            {"excluded": sorted(b.excluded), "child": _dump(b.child, attrs, depth + 1)}
            for b in node.negative
        ]
    return out


def index_stats(index: RuleIndex) -> dict[str, Any]:
    """Count nodes and edges of the index, per kind."""
    stats = {
        "depth": len(index.attrs),
        "attributes": list(index.attrs),
        "internal_nodes": 0,
        "leaf_nodes": 0,
        "exact_branches": 0,
        "wildcard_branches": 0,
        "negative_branches": 0,
        "max_fanout": 0,
        "distinct_codes": 0,
    }
    codes: set[str] = set()
    stack: list[Node] = [index.root]
    while stack:
        node = stack.pop()
        if isinstance(node, LeafNode):
            stats["leaf_nodes"] += 1
            codes.update(node.codes)
            continue
        stats["internal_nodes"] += 1
        stats["exact_branches"] += len(node.branches)
        stats["negative_branches"] += len(node.negative)
        fanout = len(node.branches) + len(node.negative)
        stack.extend(node.branches.values())
        stack.extend(b.child for b in node.negative)
        if node.wildcard is not None:
            stats["wildcard_branches"] += 1
            fanout += 1
            stack.append(node.wildcard)
        stats["max_fanout"] = max(stats["max_fanout"], fanout)
    stats["distinct_codes"] = len(codes)
    return stats
