"""Index node types.

The index is a strict tree with one level per attribute. Internal nodes
route on the object's value for that level; leaves hold the rule codes of
every rule whose selectors lead there.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Union


@dataclass
class LeafNode:
    """Terminal node at depth == len(attribute order)."""

    codes: set[str] = field(default_factory=set)


@dataclass
class NegativeBranch:
    """Child reached only when the object carries none of ``excluded``."""

    excluded: frozenset[str]
    child: Node


@dataclass
class InternalNode:
    """Routing node for one attribute level.

    branches maps an exact value to its child, wildcard is followed for any
    value, and each negative branch belongs to exactly one negative selector.
    """

    branches: dict[str, Node] = field(default_factory=dict)
    wildcard: Node | None = None
    negative: list[NegativeBranch] = field(default_factory=list)


Node = Union[LeafNode, InternalNode]
