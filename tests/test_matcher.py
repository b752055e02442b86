"""Matcher tests — store scenarios plus completeness/soundness against a naive scan."""

import itertools

import pytest

from ruletree.domain.index_builder import build_index
from ruletree.domain.matcher import Matcher, match, match_all
from ruletree.domain.records import AttributeOrder, MatchObject, Rule
from ruletree.domain.selectors import Negative, Positive, Wildcard, effective

ATTRS = AttributeOrder.of("country", "brand")

STORE_RULES = [
    {"code": "store_1", "attributes": {"country": ["US"], "brand": ["Nike"]}},
    {"code": "store_2", "attributes": {"country": ["US"]}},
    {"code": "store_3", "attributes": {"brand": {"not": ["Adidas", "Puma"]}}},
]


@pytest.fixture(scope="module")
def matcher() -> Matcher:
    return Matcher(build_index(STORE_RULES, ATTRS).index)


def _obj(object_id: str, **attributes) -> MatchObject:
    return MatchObject(id=object_id, attributes=attributes)


class TestStoreScenarios:
    """country/brand store rules."""

    def test_us_nike_matches_all_three(self, matcher):
        assert matcher.match(_obj("offer_123", country=["US"], brand=["Nike"])) == {
            "store_1",
            "store_2",
            "store_3",
        }

    def test_uk_reebok_matches_only_negative_rule(self, matcher):
        assert matcher.match(_obj("offer_456", country=["UK"], brand=["Reebok"])) == {"store_3"}

    def test_excluded_brand_drops_negative_rule(self, matcher):
        assert matcher.match(_obj("o", country=["US"], brand=["Adidas"])) == {"store_2"}

    def test_excluded_brand_outside_us_matches_nothing(self, matcher):
        assert matcher.match(_obj("o", country=["UK"], brand=["Puma"])) == set()

    def test_missing_country_only_follows_wildcard(self, matcher):
        assert matcher.match(_obj("o", brand=["Nike"])) == {"store_3"}

    def test_missing_everything_passes_negative(self, matcher):
        assert matcher.match(_obj("o")) == {"store_3"}

    def test_explicit_wildcard_value_same_as_missing(self, matcher):
        assert matcher.match(_obj("o", country=["*"], brand=["Nike"])) == {"store_3"}

    def test_multi_value_is_or_over_values(self, matcher):
        result = matcher.match(_obj("o", country=["UK", "US"], brand=["Nike"]))
        assert result == {"store_1", "store_2", "store_3"}

    def test_any_excluded_value_excludes(self, matcher):
        result = matcher.match(_obj("o", country=["US"], brand=["Nike", "Puma"]))
        assert result == {"store_1", "store_2"}

    def test_unknown_object_attribute_ignored(self, matcher):
        result = matcher.match(_obj("o", country=["US"], brand=["Nike"], color=["red"]))
        assert result == {"store_1", "store_2", "store_3"}

    def test_identical_rules_both_reported(self):
        index = build_index(
            [
                {"code": "a", "attributes": {"country": ["US"]}},
                {"code": "b", "attributes": {"country": ["US"]}},
            ],
            ATTRS,
        ).index
        assert match(index.root, _obj("o", country=["US"]), index.attrs) == {"a", "b"}


class TestMatchAll:
    """Batch driver: mapping per object id, order independent."""

    OBJECTS = [
        _obj("offer_123", country=["US"], brand=["Nike"]),
        _obj("offer_456", country=["UK"], brand=["Reebok"]),
        _obj("offer_789", country=["UK"], brand=["Adidas"]),
    ]

    def test_mapping(self, matcher):
        assert matcher.match_all(self.OBJECTS) == {
            "offer_123": {"store_1", "store_2", "store_3"},
            "offer_456": {"store_3"},
            "offer_789": set(),
        }

    def test_order_independent(self, matcher):
        assert matcher.match_all(self.OBJECTS) == matcher.match_all(list(reversed(self.OBJECTS)))

    def test_repeat_runs_equal(self, matcher):
        assert matcher.match_all(self.OBJECTS) == matcher.match_all(self.OBJECTS)

    def test_duplicate_ids_merge(self, matcher):
        objects = [_obj("x", country=["US"], brand=["Adidas"]), _obj("x", country=["UK"], brand=["Nike"])]
        assert matcher.match_all(objects) == {"x": {"store_2", "store_3"}}

    def test_empty_input(self, matcher):
        assert matcher.match_all([]) == {}

    def test_module_function(self):
        index = build_index(STORE_RULES, ATTRS).index
        assert match_all(index.root, self.OBJECTS[:1], index.attrs) == {
            "offer_123": {"store_1", "store_2", "store_3"}
        }


class TestEmptyIndex:
    def test_no_rules_matches_nothing(self):
        index = build_index([], ATTRS).index
        assert match(index.root, _obj("o", country=["US"]), index.attrs) == set()

    def test_only_negative_children(self):
        """A node with only negative branches still reads the right attribute."""
        index = build_index(
            [{"code": "no_uk", "attributes": {"country": {"not": ["UK"]}, "brand": {"not": ["Puma"]}}}],
            ATTRS,
        ).index
        assert match(index.root, _obj("o", country=["US"], brand=["UK"]), index.attrs) == {"no_uk"}
        assert match(index.root, _obj("o", country=["UK"], brand=["Nike"]), index.attrs) == set()


# ---------------------------------------------------------------------------
# Completeness / soundness against naive per-rule evaluation
# ---------------------------------------------------------------------------

SELECTOR_OPTIONS = [
    None,
    Positive(values={"x"}),
    Positive(values={"x", "y"}),
    Negative(values={"x"}),
    Negative(values={"y", "z"}),
    Positive(values=set()),
]

VALUE_OPTIONS = [None, ["x"], ["y"], ["z"], ["x", "z"], ["w"]]


def _naive_satisfies(rule: Rule, obj: MatchObject, attrs: AttributeOrder) -> bool:
    for name in attrs:
        selector = effective(rule.selector_for(name))
        values = obj.values_for(name)
        if isinstance(selector, Positive) and values.isdisjoint(selector.values):
            return False
        if isinstance(selector, Negative) and not values.isdisjoint(selector.values):
            return False
        assert isinstance(selector, (Positive, Negative, Wildcard))
    return True


def _grid_rules(attrs: AttributeOrder) -> list[Rule]:
    rules = []
    for i, combo in enumerate(itertools.product(SELECTOR_OPTIONS, repeat=len(attrs))):
        selectors = {name: sel for name, sel in zip(attrs, combo) if sel is not None}
        rules.append(Rule(code=f"r{i}", selectors=selectors))
    return rules


def _grid_objects(attrs: AttributeOrder) -> list[MatchObject]:
    objects = []
    for i, combo in enumerate(itertools.product(VALUE_OPTIONS, repeat=len(attrs))):
        attributes = {name: vals for name, vals in zip(attrs, combo) if vals is not None}
        objects.append(MatchObject(id=f"o{i}", attributes=attributes))
    return objects


@pytest.mark.parametrize("names", [("a",), ("a", "b"), ("a", "b", "c")])
def test_index_agrees_with_naive_scan(names):
    attrs = AttributeOrder(names=names)
    rules = _grid_rules(attrs)
    objects = _grid_objects(attrs)
    result = build_index(rules, attrs)
    assert result.rules_indexed == len(rules)

    mapping = match_all(result.root, objects, attrs)
    for obj in objects:
        expected = {r.code for r in rules if _naive_satisfies(r, obj, attrs)}
        assert mapping[obj.id] == expected, obj
