"""Request models for classification."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class ClassifyRequest(BaseModel):
    """A batch of raw object records to classify against the loaded index."""

    objects: list[dict[str, Any]] = Field(
        default_factory=list,
        description='Object records: {"id": ..., "attributes": {name: value | [values]}}',
    )
    include_unmatched: bool = Field(
        default=True, description="Report objects that matched no rule (with empty codes)"
    )
