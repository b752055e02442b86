"""Domain layer for ruletree."""

from .errors import (
    BuildDiagnostic,
    DiagnosticKind,
    MalformedObjectError,
    MalformedRuleError,
    RuleError,
    UnknownAttributeError,
)
from .index_builder import (
    BuildResult,
    IndexBuilder,
    RuleIndex,
    UnknownAttributePolicy,
    build_index,
)
from .inspection import dump_index, index_stats
from .matcher import Matcher, match, match_all
from .nodes import InternalNode, LeafNode, NegativeBranch, Node
from .parsing import parse_object, parse_rule, parse_selector
from .records import AttributeOrder, MatchObject, Rule
from .selectors import ANY, WILDCARD, Negative, Positive, Selector, Wildcard, canonical_value

__all__ = [
    "ANY",
    "AttributeOrder",
    "BuildDiagnostic",
    "BuildResult",
    "DiagnosticKind",
    "IndexBuilder",
    "InternalNode",
    "LeafNode",
    "MalformedObjectError",
    "MalformedRuleError",
    "MatchObject",
    "Matcher",
    "Negative",
    "NegativeBranch",
    "Node",
    "Positive",
    "Rule",
    "RuleError",
    "RuleIndex",
    "Selector",
    "UnknownAttributeError",
    "UnknownAttributePolicy",
    "WILDCARD",
    "Wildcard",
    "build_index",
    "canonical_value",
    "dump_index",
    "index_stats",
    "match",
    "match_all",
    "parse_object",
    "parse_rule",
    "parse_selector",
]
