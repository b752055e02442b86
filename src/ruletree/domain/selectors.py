"""Per-attribute rule selectors.

A rule constrains each attribute with one of three tagged selectors:

- ``Positive``: the object must carry at least one of the listed values
- ``Negative``: the object must carry none of the listed values
- ``Wildcard``: no constraint (also matches objects missing the attribute)
"""

from __future__ import annotations

from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

WILDCARD = "*"
"""Reserved value: wildcard branch key and the value of a missing attribute."""


def canonical_value(value: Any) -> str:
    """Return the canonical string form used for value comparison.

    Raises:
        TypeError: if ``value`` is not a scalar (str, bool, int, float).
    """
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, str):
        return value
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        if value.is_integer():
            return str(int(value))
        return repr(value)
    raise TypeError(f"attribute values must be scalars, got {type(value).__name__}")


def _canonical_set(values: Any) -> frozenset[str]:
    if isinstance(values, dict):
        raise ValueError("selector values must be a value or a list of values")
    if isinstance(values, (str, bytes)) or not hasattr(values, "__iter__"):
        values = [values]
    try:
        out = frozenset(canonical_value(v) for v in values)
    except TypeError as exc:
        raise ValueError(str(exc)) from exc
    if WILDCARD in out:
        raise ValueError(f"{WILDCARD!r} is reserved and cannot be used as a selector value")
    return out


class Positive(BaseModel):
    """Accept objects whose values intersect ``values``."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["positive"] = "positive"
    values: frozenset[str] = Field(..., description="Accepted values")

    @field_validator("values", mode="before")
    @classmethod
    def _canonicalize(cls, v: Any) -> frozenset[str]:
        return _canonical_set(v)


class Negative(BaseModel):
    """Accept objects whose values do not intersect ``values``."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["negative"] = "negative"
    values: frozenset[str] = Field(..., description="Excluded values")

    @field_validator("values", mode="before")
    @classmethod
    def _canonicalize(cls, v: Any) -> frozenset[str]:
        return _canonical_set(v)


class Wildcard(BaseModel):
    """No constraint on the attribute."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["wildcard"] = "wildcard"


Selector = Annotated[Union[Positive, Negative, Wildcard], Field(discriminator="kind")]

ANY = Wildcard()


def effective(selector: Positive | Negative | Wildcard | None) -> Positive | Negative | Wildcard:
    """Collapse selectors that impose no constraint to ``ANY``.

    An absent selector, a positive set with no values and a negative set
    with no values all accept every object.
    """
    if selector is None or isinstance(selector, Wildcard):
        return ANY
    if not selector.values:
        return ANY
    return selector
