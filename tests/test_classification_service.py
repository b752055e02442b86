"""Unit tests for ClassificationService with in-memory sources."""

import logging

import pytest

from ruletree.adapters.json_source import InMemoryRuleSource
from ruletree.domain.errors import DiagnosticKind
from ruletree.domain.index_builder import UnknownAttributePolicy
from ruletree.domain.records import MatchObject
from ruletree.models.requests import ClassifyRequest
from ruletree.observability import metrics_snapshot, reset_metrics
from ruletree.services.classification_service import ClassificationService

# ---------------------------------------------------------------------------
# Fakes
# ---------------------------------------------------------------------------


class FixedRequestIdProvider:
    def __init__(self):
        self.calls = 0

    def new_request_id(self) -> str:
        self.calls += 1
        return f"req-{self.calls}"


RULES = [
    {"code": "store_1", "attributes": {"country": ["US"], "brand": ["Nike"]}},
    {"code": "store_2", "attributes": {"country": ["US"]}},
    {"code": "store_3", "attributes": {"brand": {"not": ["Adidas", "Puma"]}}},
]

OBJECTS = [
    {"id": "offer_123", "attributes": {"country": ["US"], "brand": ["Nike"]}},
    {"id": "offer_456", "attributes": {"country": ["UK"], "brand": ["Reebok"]}},
    {"id": "offer_789", "attributes": {"country": ["UK"], "brand": ["Puma"]}},
]


@pytest.fixture(autouse=True)
def _clean_metrics():
    reset_metrics()
    yield
    reset_metrics()


@pytest.fixture
def service() -> ClassificationService:
    svc = ClassificationService(
        attribute_order=["country", "brand"],
        request_id_provider=FixedRequestIdProvider(),
    )
    svc.load(RULES)
    return svc


class TestLoad:
    def test_report_counts(self):
        svc = ClassificationService(["country", "brand"])
        report = svc.load(RULES + [{"code": "bad", "attributes": {"brand": {"like": "N%"}}}])
        assert report.attributes == ["country", "brand"]
        assert report.rules_indexed == 3
        assert report.rules_skipped == 1
        assert report.distinct_codes == 3
        assert report.diagnostics[0].code == "bad"
        assert report.stats["leaf_nodes"] == 3

    def test_not_loaded_raises(self):
        svc = ClassificationService(["country"])
        assert not svc.is_loaded
        with pytest.raises(RuntimeError, match="no rule index loaded"):
            svc.classify(ClassifyRequest(objects=OBJECTS))

    def test_reload_replaces_index(self, service):
        service.load([{"code": "uk_only", "attributes": {"country": ["UK"]}}])
        response = service.classify(ClassifyRequest(objects=OBJECTS))
        assert response.as_mapping() == {
            "offer_123": set(),
            "offer_456": {"uk_only"},
            "offer_789": {"uk_only"},
        }

    def test_load_from_source_merges_diagnostics(self):
        svc = ClassificationService(["country", "brand"])
        source = InMemoryRuleSource(RULES + [42])
        report = svc.load_from(source)
        assert report.rules_indexed == 3
        assert report.rules_skipped == 1
        assert report.diagnostics[0].index == 3

    def test_reject_policy(self):
        svc = ClassificationService(
            ["country", "brand"], unknown_attribute_policy=UnknownAttributePolicy.reject
        )
        report = svc.load(RULES + [{"code": "colored", "attributes": {"color": ["red"]}}])
        assert report.rules_skipped == 1
        assert report.diagnostics[0].kind == DiagnosticKind.unknown_attribute

    def test_skipped_rules_logged(self, caplog):
        svc = ClassificationService(["country"])
        with caplog.at_level(logging.WARNING, logger="ruletree"):
            svc.load([{"code": ""}])
        assert any(r.getMessage() == "rule_skipped" for r in caplog.records)

    def test_metrics_updated(self, service):
        snap = metrics_snapshot()
        assert snap["builds"] == 1
        assert snap["rules_indexed"] == 3


class TestClassify:
    def test_store_scenarios(self, service):
        response = service.classify(ClassifyRequest(objects=OBJECTS))
        assert response.request_id == "req-1"
        assert response.as_mapping() == {
            "offer_123": {"store_1", "store_2", "store_3"},
            "offer_456": {"store_3"},
            "offer_789": set(),
        }
        assert response.warnings == []

    def test_codes_sorted(self, service):
        response = service.classify(ClassifyRequest(objects=OBJECTS[:1]))
        assert response.results[0].codes == ["store_1", "store_2", "store_3"]

    def test_exclude_unmatched(self, service):
        response = service.classify(ClassifyRequest(objects=OBJECTS, include_unmatched=False))
        assert {r.id for r in response.results} == {"offer_123", "offer_456"}

    def test_bad_records_reported_not_raised(self, service):
        records = OBJECTS[:1] + [{"attributes": {"country": "US"}}, {"id": "x", "attributes": {"brand": {"a": 1}}}]
        response = service.classify(ClassifyRequest(objects=records))
        assert [r.id for r in response.results] == ["offer_123"]
        assert [d.index for d in response.diagnostics] == [1, 2]
        assert all(d.kind == DiagnosticKind.malformed_object for d in response.diagnostics)
        assert "2 object record(s) could not be read" in response.warnings

    def test_duplicate_ids_warn(self, service):
        records = [OBJECTS[0], {"id": "offer_123", "attributes": {"country": "UK"}}]
        response = service.classify(ClassifyRequest(objects=records))
        assert response.as_mapping() == {"offer_123": {"store_1", "store_2", "store_3"}}
        assert any("duplicate" in w for w in response.warnings)

    def test_match_objects(self, service):
        result = service.match_objects([MatchObject(id="o", attributes={"country": ["US"]})])
        assert result == {"o": {"store_2", "store_3"}}
        assert metrics_snapshot()["objects_classified"] == 1


class TestClassifyBatch:
    def test_pages(self, service):
        pages = list(service.classify_batch(OBJECTS, page_size=2))
        assert len(pages) == 2
        assert [len(p.results) for p in pages] == [2, 1]
        assert [p.request_id for p in pages] == ["req-1", "req-2"]

    def test_invalid_page_size(self, service):
        with pytest.raises(ValueError):
            list(service.classify_batch(OBJECTS, page_size=0))

    def test_default_page_size_is_max_batch_size(self):
        svc = ClassificationService(["country", "brand"], max_batch_size=2)
        svc.load(RULES)
        assert [len(p.results) for p in svc.classify_batch(OBJECTS)] == [2, 1]

    def test_invalid_max_batch_size(self):
        with pytest.raises(ValueError):
            ClassificationService(["country"], max_batch_size=0)


class TestDiagnosticsViews:
    def test_dump_and_stats(self, service):
        dump = service.dump()
        assert dump["attribute"] == "country"
        assert service.stats()["distinct_codes"] == 3
