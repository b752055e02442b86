"""Port: rule and object sources."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from ..domain.errors import BuildDiagnostic
from ..domain.records import MatchObject, Rule


@runtime_checkable
class RuleSource(Protocol):
    """Produce the ordered rule set before a build.

    Records that cannot be read are skipped and reported via ``diagnostics``.
    """

    def load_rules(self) -> list[Rule]: ...

    @property
    def diagnostics(self) -> list[BuildDiagnostic]: ...


@runtime_checkable
class ObjectSource(Protocol):
    """Produce the ordered objects to classify."""

    def load_objects(self) -> list[MatchObject]: ...

    @property
    def diagnostics(self) -> list[BuildDiagnostic]: ...
