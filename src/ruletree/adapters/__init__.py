"""Concrete source adapters."""

from .json_source import (
    InMemoryObjectSource,
    InMemoryRuleSource,
    JsonFileObjectSource,
    JsonFileRuleSource,
)

__all__ = [
    "InMemoryObjectSource",
    "InMemoryRuleSource",
    "JsonFileObjectSource",
    "JsonFileRuleSource",
]
