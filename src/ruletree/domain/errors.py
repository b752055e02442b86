"""Build-time rule errors and the diagnostics they are reported as."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field


class DiagnosticKind(str, Enum):
    """Categories of per-rule build problems."""

    malformed_rule = "malformed_rule"
    unknown_attribute = "unknown_attribute"
    malformed_object = "malformed_object"


class RuleError(ValueError):
    """Base class for errors raised while ingesting or indexing a rule."""

    kind: DiagnosticKind = DiagnosticKind.malformed_rule

    def __init__(self, message: str, code: str | None = None, index: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.index = index

    def to_diagnostic(self) -> BuildDiagnostic:
        return BuildDiagnostic(kind=self.kind, message=self.message, code=self.code, index=self.index)


class MalformedRuleError(RuleError):
    """A rule record or selector has an unsupported shape."""

    kind = DiagnosticKind.malformed_rule


class UnknownAttributeError(RuleError):
    """A rule constrains an attribute outside the attribute order."""

    kind = DiagnosticKind.unknown_attribute


class MalformedObjectError(RuleError):
    """An object record cannot be read."""

    kind = DiagnosticKind.malformed_object


class BuildDiagnostic(BaseModel):
    """A non-fatal problem reported for one input record."""

    kind: DiagnosticKind = Field(..., description="Diagnostic category")
    message: str = Field(..., description="Human-readable description")
    code: str | None = Field(default=None, description="Rule code or object id, when known")
    index: int | None = Field(default=None, description="Position of the record in its source")
