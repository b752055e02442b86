"""JSON-backed rule and object sources."""

from __future__ import annotations

import json
from collections.abc import Iterable
from pathlib import Path
from typing import Any

from ..domain.errors import BuildDiagnostic, RuleError
from ..domain.parsing import parse_object, parse_rule
from ..domain.records import MatchObject, Rule


def read_json_list(path: Path, what: str) -> list[Any]:
    """Read a JSON file that must contain a list.

    Accepts either a bare list or an object with a ``what`` key holding it
    (e.g. ``{"rules": [...]}``).

    Raises:
        FileNotFoundError: if ``path`` does not exist.
        ValueError: if the JSON is invalid or not a list.
    """
    if not path.exists():
        raise FileNotFoundError(f"{what} file not found: {path}")
    with open(path, encoding="utf-8") as f:
        try:
            raw = json.load(f)
        except json.JSONDecodeError as exc:
            raise ValueError(f"invalid JSON in {path}: {exc}") from exc
    if isinstance(raw, dict) and isinstance(raw.get(what), list):
        raw = raw[what]
    if not isinstance(raw, list):
        raise ValueError(f"{path} must contain a list of {what}")
    return raw


class InMemoryRuleSource:
    """Parse rule records already held in memory."""

    def __init__(self, records: Iterable[Any]) -> None:
        self._records = list(records)
        self._diagnostics: list[BuildDiagnostic] = []

    @property
    def diagnostics(self) -> list[BuildDiagnostic]:
        return list(self._diagnostics)

    def load_rules(self) -> list[Rule]:
        self._diagnostics = []
        rules: list[Rule] = []
        for i, record in enumerate(self._records):
            try:
                rules.append(parse_rule(record, index=i))
            except RuleError as exc:
                self._diagnostics.append(exc.to_diagnostic())
        return rules


class InMemoryObjectSource:
    """Parse object records already held in memory."""

    def __init__(self, records: Iterable[Any]) -> None:
        self._records = list(records)
        self._diagnostics: list[BuildDiagnostic] = []

    @property
    def diagnostics(self) -> list[BuildDiagnostic]:
        return list(self._diagnostics)

    def load_objects(self) -> list[MatchObject]:
        self._diagnostics = []
        objects: list[MatchObject] = []
        for i, record in enumerate(self._records):
            try:
                objects.append(parse_object(record, index=i))
            except RuleError as exc:
                self._diagnostics.append(exc.to_diagnostic())
        return objects


class JsonFileRuleSource(InMemoryRuleSource):
    """Rules from a JSON file (list, or ``{"rules": [...]}``)."""

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)
        super().__init__(read_json_list(self.path, "rules"))


class JsonFileObjectSource(InMemoryObjectSource):
    """Objects from a JSON file (list, or ``{"objects": [...]}``)."""

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)
        super().__init__(read_json_list(self.path, "objects"))
