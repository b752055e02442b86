"""Rule, object and attribute-order models."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .selectors import WILDCARD, Selector, canonical_value


class AttributeOrder(BaseModel):
    """Ordered attribute names; one index level per attribute."""

    model_config = ConfigDict(frozen=True)

    names: tuple[str, ...] = Field(default=(), description="Attribute names in index order")

    @field_validator("names", mode="before")
    @classmethod
    def _split(cls, v: Any) -> Any:
        if isinstance(v, str):
            return tuple(n.strip() for n in v.split(",") if n.strip())
        return v

    @field_validator("names")
    @classmethod
    def _unique(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        if any(not n for n in v):
            raise ValueError("attribute names must be non-empty")
        if len(set(v)) != len(v):
            raise ValueError(f"attribute names must be unique, got {list(v)}")
        return v

    @classmethod
    def of(cls, *names: str) -> AttributeOrder:
        return cls(names=names)

    @property
    def depth(self) -> int:
        return len(self.names)

    def __len__(self) -> int:
        return len(self.names)

    def __getitem__(self, depth: int) -> str:
        return self.names[depth]

    def __contains__(self, name: object) -> bool:
        return name in self.names

    def __iter__(self):
        return iter(self.names)


class Rule(BaseModel):
    """A rule code plus its per-attribute selectors.

    Attributes without an entry in ``selectors`` are unconstrained.
    """

    model_config = ConfigDict(frozen=True)

    code: str = Field(..., min_length=1, description="Rule code reported on match")
    selectors: dict[str, Selector] = Field(default_factory=dict, description="Selector per attribute")

    @field_validator("code", mode="before")
    @classmethod
    def _code_str(cls, v: Any) -> Any:
        if isinstance(v, (int, float, bool)):
            return canonical_value(v)
        if isinstance(v, str):
            return v.strip()
        return v

    def selector_for(self, attribute: str) -> Selector | None:
        return self.selectors.get(attribute)

    def unknown_attributes(self, attrs: AttributeOrder) -> list[str]:
        """Attributes this rule constrains that the index never consults."""
        return sorted(name for name in self.selectors if name not in attrs)


class MatchObject(BaseModel):
    """An object to classify: identifier plus observed value sets."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1, description="Object identifier")
    attributes: dict[str, frozenset[str]] = Field(
        default_factory=dict, description="Observed values per attribute"
    )

    @field_validator("id", mode="before")
    @classmethod
    def _id_str(cls, v: Any) -> Any:
        if isinstance(v, (int, float, bool)):
            return canonical_value(v)
        if isinstance(v, str):
            return v.strip()
        return v

    @field_validator("attributes", mode="before")
    @classmethod
    def _canonicalize(cls, v: Any) -> Any:
        if not isinstance(v, dict):
            return v
        out: dict[str, frozenset[str]] = {}
        for name, raw in v.items():
            if raw is None:
                continue
            if isinstance(raw, dict):
                raise ValueError(f"attribute {name!r}: expected a value or list of values")
            if isinstance(raw, (str, bytes, int, float, bool)):
                raw = [raw]
            try:
                values = frozenset(canonical_value(item) for item in raw)
            except TypeError as exc:
                raise ValueError(f"attribute {name!r}: {exc}") from exc
            if values:
                out[str(name)] = values
        return out

    def values_for(self, attribute: str) -> frozenset[str]:
        """Observed values, or ``{"*"}`` when the attribute is absent."""
        return self.attributes.get(attribute) or frozenset((WILDCARD,))
