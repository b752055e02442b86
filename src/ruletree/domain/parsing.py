"""Resolve raw rule/object records into typed models.

Raw selector shapes accepted per attribute::

    null / []                       -> wildcard
    "US" / ["US", "CA"]             -> positive
    {"in": [...]}                   -> positive
    {"not": [...]} / {"not_in": ..} -> negative
    {"kind": "negative", "values": [...]}
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import TypeAdapter, ValidationError

from .errors import MalformedObjectError, MalformedRuleError
from .records import MatchObject, Rule
from .selectors import ANY, Negative, Positive, Selector, Wildcard

_SELECTOR_ADAPTER: TypeAdapter[Selector] = TypeAdapter(Selector)

_POSITIVE_OPS = frozenset({"in", "any_of"})
_NEGATIVE_OPS = frozenset({"not", "not_in", "none_of"})


def parse_selector(raw: Any) -> Positive | Negative | Wildcard:
    """Return the typed selector for one raw attribute constraint.

    Raises:
        ValueError: if the shape is not a recognised selector.
    """
    if raw is None:
        return ANY
    if isinstance(raw, (Positive, Negative, Wildcard)):
        return raw
    if isinstance(raw, Mapping):
        if "kind" in raw:
            return _SELECTOR_ADAPTER.validate_python(dict(raw))
        if len(raw) != 1:
            raise ValueError(f"selector object must have exactly one operator, got {sorted(raw)}")
        ((op, values),) = raw.items()
        if op in _POSITIVE_OPS:
            return Positive(values=values)
        if op in _NEGATIVE_OPS:
            return Negative(values=values)
        raise ValueError(f"unsupported selector operator {op!r}")
    if isinstance(raw, (list, tuple, set, frozenset)):
        return Positive(values=raw)
    return Positive(values=[raw])


def parse_rule(record: Any, index: int | None = None) -> Rule:
    """Build a Rule from ``{"code": ..., "attributes": {...}}``.

    Raises:
        MalformedRuleError: on any unreadable part of the record.
    """
    if isinstance(record, Rule):
        return record
    if not isinstance(record, Mapping):
        raise MalformedRuleError(
            f"rule record must be an object, got {type(record).__name__}", index=index
        )
    code = record.get("code")
    code_label = None if code is None else str(code)
    attributes = record.get("attributes", record.get("selectors")) or {}
    if not isinstance(attributes, Mapping):
        raise MalformedRuleError("rule attributes must be an object", code=code_label, index=index)

    selectors: dict[str, Selector] = {}
    for name, raw in attributes.items():
        try:
            selectors[str(name)] = parse_selector(raw)
        except (ValueError, TypeError) as exc:
            raise MalformedRuleError(
                f"attribute {name!r}: {_first_line(exc)}", code=code_label, index=index
            ) from exc

    try:
        return Rule(code=code, selectors=selectors)
    except ValidationError as exc:
        raise MalformedRuleError(_first_line(exc), code=code_label, index=index) from exc


def parse_object(record: Any, index: int | None = None) -> MatchObject:
    """Build a MatchObject from ``{"id": ..., "attributes": {...}}``.

    ``ID`` is accepted as an alias for ``id``.

    Raises:
        MalformedObjectError: on any unreadable part of the record.
    """
    if isinstance(record, MatchObject):
        return record
    if not isinstance(record, Mapping):
        raise MalformedObjectError(
            f"object record must be an object, got {type(record).__name__}", index=index
        )
    object_id = record.get("id", record.get("ID"))
    try:
        return MatchObject(id=object_id, attributes=record.get("attributes") or {})
    except ValidationError as exc:
        label = None if object_id is None else str(object_id)
        raise MalformedObjectError(_first_line(exc), code=label, index=index) from exc


def _first_line(exc: Exception) -> str:
    if isinstance(exc, ValidationError):
        errors = exc.errors()
        if errors:
            loc = ".".join(str(p) for p in errors[0].get("loc", ()))
            msg = errors[0].get("msg", str(exc))
            return f"{loc}: {msg}" if loc else msg
    return str(exc).splitlines()[0] if str(exc) else type(exc).__name__
