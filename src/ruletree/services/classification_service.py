"""ClassificationService: builds the rule index and classifies objects."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Sequence
from typing import Any

from ..domain.errors import BuildDiagnostic, RuleError
from ..domain.index_builder import IndexBuilder, RuleIndex, UnknownAttributePolicy
from ..domain.inspection import dump_index, index_stats
from ..domain.matcher import Matcher
from ..domain.parsing import parse_object
from ..domain.records import AttributeOrder, MatchObject, Rule
from ..models.requests import ClassifyRequest
from ..models.responses import BuildReport, ClassifyResponse, ObjectMatch
from ..observability import get_logger, record_build, record_classified
from ..ports.id_gen import RequestIdProvider, UuidRequestIdProvider
from ..ports.sources import RuleSource


class ClassificationService:
    """Owns the current index; rebuilding swaps in a fresh one."""

    def __init__(
        self,
        attribute_order: AttributeOrder | Sequence[str],
        unknown_attribute_policy: UnknownAttributePolicy = UnknownAttributePolicy.ignore,
        request_id_provider: RequestIdProvider | None = None,
        logger: Any = None,
        max_batch_size: int = 500,
    ) -> None:
        if max_batch_size < 1:
            raise ValueError(f"max_batch_size must be >= 1, got {max_batch_size}")
        self._attrs = (
            attribute_order
            if isinstance(attribute_order, AttributeOrder)
            else AttributeOrder(names=attribute_order)
        )
        self._builder = IndexBuilder(unknown_attribute_policy)
        self._req_id = request_id_provider or UuidRequestIdProvider()
        self._logger = logger or get_logger()
        self._matcher: Matcher | None = None
        self._max_batch_size = max_batch_size

    @property
    def attribute_order(self) -> AttributeOrder:
        return self._attrs

    @property
    def max_batch_size(self) -> int:
        return self._max_batch_size

    @property
    def is_loaded(self) -> bool:
        return self._matcher is not None

    @property
    def index(self) -> RuleIndex:
        return self._require_matcher().index

    def load(
        self,
        rules: Iterable[Rule | dict[str, Any]],
        extra_diagnostics: Sequence[BuildDiagnostic] = (),
    ) -> BuildReport:
        """Build a new index from ``rules`` and make it current."""
        self._logger.info(
            "index_build_start",
            extra={"attributes": list(self._attrs), "policy": self._builder.unknown_attribute_policy.value},
        )
        result = self._builder.build(rules, self._attrs)
        diagnostics = [*extra_diagnostics, *result.diagnostics]
        for diag in diagnostics:
            self._logger.warning(
                "rule_skipped",
                extra={"kind": diag.kind.value, "code": diag.code, "index": diag.index, "reason": diag.message},
            )

        self._matcher = Matcher(result.index)
        rules_skipped = len(extra_diagnostics) + result.rules_skipped
        record_build(result.rules_indexed, rules_skipped)

        stats = index_stats(result.index)
        report = BuildReport(
            attributes=list(self._attrs),
            rules_indexed=result.rules_indexed,
            rules_skipped=rules_skipped,
            distinct_codes=len(result.codes),
            diagnostics=diagnostics,
            stats=stats,
        )
        self._logger.info(
            "index_build_done",
            extra={
                "rules_indexed": report.rules_indexed,
                "rules_skipped": report.rules_skipped,
                "leaf_nodes": stats["leaf_nodes"],
            },
        )
        return report

    def load_from(self, source: RuleSource) -> BuildReport:
        """Build from a RuleSource, carrying over its ingestion diagnostics."""
        rules = source.load_rules()
        return self.load(rules, extra_diagnostics=source.diagnostics)

    def match_objects(self, objects: Iterable[MatchObject]) -> dict[str, set[str]]:
        """Object id -> matched codes for already-parsed objects."""
        results = self._require_matcher().match_all(objects)
        record_classified(len(results))
        return results

    def classify(self, request: ClassifyRequest) -> ClassifyResponse:
        """Classify raw object records; unreadable records are reported, not raised."""
        matcher = self._require_matcher()
        request_id = self._req_id.new_request_id()

        objects: list[MatchObject] = []
        diagnostics: list[BuildDiagnostic] = []
        for i, record in enumerate(request.objects):
            try:
                objects.append(parse_object(record, index=i))
            except RuleError as exc:
                diagnostics.append(exc.to_diagnostic())

        mapping = matcher.match_all(objects)
        record_classified(len(mapping))

        results = [
            ObjectMatch(id=object_id, codes=sorted(codes))
            for object_id, codes in mapping.items()
            if codes or request.include_unmatched
        ]
        warnings: list[str] = []
        if len(mapping) < len(objects):
            warnings.append(f"{len(objects) - len(mapping)} duplicate object id(s); codes were merged")
        if diagnostics:
            warnings.append(f"{len(diagnostics)} object record(s) could not be read")

        self._logger.info(
            "classify_done",
            extra={
                "trace_id": request_id,
                "objects": len(objects),
                "matched": sum(1 for codes in mapping.values() if codes),
                "rejected": len(diagnostics),
            },
        )
        return ClassifyResponse(
            request_id=request_id,
            results=results,
            diagnostics=diagnostics,
            warnings=warnings,
        )

    def classify_batch(
        self,
        records: Sequence[dict[str, Any]],
        page_size: int | None = None,
        include_unmatched: bool = True,
    ) -> Iterator[ClassifyResponse]:
        """Classify records page by page, yielding one response per page.

        ``page_size`` defaults to the service's ``max_batch_size``.
        """
        if page_size is None:
            page_size = self._max_batch_size
        if page_size < 1:
            raise ValueError(f"page_size must be >= 1, got {page_size}")
        for start in range(0, len(records), page_size):
            page = list(records[start : start + page_size])
            yield self.classify(ClassifyRequest(objects=page, include_unmatched=include_unmatched))

    def dump(self) -> dict[str, Any]:
        return dump_index(self.index)

    def stats(self) -> dict[str, Any]:
        return index_stats(self.index)

    def _require_matcher(self) -> Matcher:
        if self._matcher is None:
            raise RuntimeError("no rule index loaded; call load() first")
        return self._matcher
