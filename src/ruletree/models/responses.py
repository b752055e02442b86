"""Response models for index builds and classification."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from ..domain.errors import BuildDiagnostic


class BuildReport(BaseModel):
    """Summary of an index build."""

    attributes: list[str] = Field(..., description="Attribute order the index was built for")
    rules_indexed: int = Field(..., ge=0, description="Rules inserted into the index")
    rules_skipped: int = Field(..., ge=0, description="Rules rejected with a diagnostic")
    distinct_codes: int = Field(..., ge=0, description="Distinct rule codes in the index")
    diagnostics: list[BuildDiagnostic] = Field(default_factory=list)
    stats: dict[str, Any] = Field(default_factory=dict, description="Node/edge counts")


class ObjectMatch(BaseModel):
    """Codes matched for one object."""

    id: str = Field(..., description="Object identifier")
    codes: list[str] = Field(default_factory=list, description="Matched rule codes, sorted")


class ClassifyResponse(BaseModel):
    """Result of classifying a batch of objects."""

    request_id: str = Field(..., description="Unique request identifier")
    results: list[ObjectMatch] = Field(default_factory=list)
    diagnostics: list[BuildDiagnostic] = Field(
        default_factory=list, description="Object records that could not be read"
    )
    warnings: list[str] = Field(default_factory=list)

    def as_mapping(self) -> dict[str, set[str]]:
        """Object id -> set of codes."""
        return {r.id: set(r.codes) for r in self.results}
