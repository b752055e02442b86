"""Matcher: walks a built index against an object's attribute values."""

from __future__ import annotations

from collections.abc import Iterable

from .index_builder import RuleIndex
from .nodes import LeafNode, Node
from .records import AttributeOrder, MatchObject


def match(root: Node, obj: MatchObject, attrs: AttributeOrder) -> set[str]:
    """Return every rule code whose selectors are all satisfied by ``obj``.

    ``attrs`` must be the attribute order the index was built with. An
    attribute missing from the object is read as the wildcard value, so it
    only follows wildcard and negative branches. Multiple values for one
    attribute are OR-ed: each value that has an exact branch is followed.
    """
    return _walk(root, obj, attrs, 0)


def _walk(node: Node, obj: MatchObject, attrs: AttributeOrder, depth: int) -> set[str]:
    if isinstance(node, LeafNode):
        return set(node.codes)

    values = obj.values_for(attrs[depth])
    matched: set[str] = set()

    for value in values:
        child = node.branches.get(value)
        if child is not None:
            matched |= _walk(child, obj, attrs, depth + 1)

    if node.wildcard is not None:
        matched |= _walk(node.wildcard, obj, attrs, depth + 1)

    for branch in node.negative:
        if values.isdisjoint(branch.excluded):
            matched |= _walk(branch.child, obj, attrs, depth + 1)

    return matched


def match_all(
    root: Node,
    objects: Iterable[MatchObject],
    attrs: AttributeOrder,
) -> dict[str, set[str]]:
    """Match each object; objects sharing an id have their codes merged."""
    results: dict[str, set[str]] = {}
    for obj in objects:
        results.setdefault(obj.id, set()).update(match(root, obj, attrs))
    return results


class Matcher:
    """Read-only matcher bound to one built index."""

    def __init__(self, index: RuleIndex) -> None:
        self._index = index

    @property
    def index(self) -> RuleIndex:
        return self._index

    def match(self, obj: MatchObject) -> set[str]:
        return match(self._index.root, obj, self._index.attrs)

    def match_all(self, objects: Iterable[MatchObject]) -> dict[str, set[str]]:
        return match_all(self._index.root, objects, self._index.attrs)
