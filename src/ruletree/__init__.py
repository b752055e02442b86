"""ruletree: classify objects against attribute rules via a layered index."""

from .domain import (
    AttributeOrder,
    BuildResult,
    IndexBuilder,
    MatchObject,
    Matcher,
    Negative,
    Positive,
    Rule,
    RuleIndex,
    UnknownAttributePolicy,
    Wildcard,
    build_index,
    match,
    match_all,
)

__version__ = "0.1.0"
__all__ = [
    "AttributeOrder",
    "BuildResult",
    "IndexBuilder",
    "MatchObject",
    "Matcher",
    "Negative",
    "Positive",
    "Rule",
    "RuleIndex",
    "UnknownAttributePolicy",
    "Wildcard",
    "build_index",
    "match",
    "match_all",
]
