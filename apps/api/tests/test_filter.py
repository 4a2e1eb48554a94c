"""Tests for the catalog filter predicates."""
from __future__ import annotations

from datetime import date, datetime

from app.repositories import properties as properties_repo
from app.schemas.properties import FilterCriteria

from conftest import make_property

NO_FILTERS = {"type": "any", "minPrice": 0, "maxPrice": 0, "minBeds": 0, "maxBeds": 10, "postcode": ""}


def _ids(results) -> list[str]:
    return [prop.id for prop in results]


def test_inactive_criteria_return_everything_in_order(sample_properties):
    results = properties_repo.filter_properties(sample_properties, FilterCriteria.model_validate(NO_FILTERS))

    assert _ids(results) == ["prop1", "prop2", "prop3"]
    assert results is not sample_properties


def test_default_criteria_match_form_reset_state(sample_properties):
    results = properties_repo.filter_properties(sample_properties, FilterCriteria())

    assert _ids(results) == ["prop1", "prop2", "prop3"]


def test_price_range_keeps_original_order(sample_properties):
    criteria = FilterCriteria(type="any", min_price=300000, max_price=500000)

    results = properties_repo.filter_properties(sample_properties, criteria)

    assert _ids(results) == ["prop1", "prop2"]


def test_exact_price_range(sample_properties):
    criteria = FilterCriteria(min_price=450000, max_price=450000)

    results = properties_repo.filter_properties(sample_properties, criteria)

    assert _ids(results) == ["prop1"]
    assert all(prop.price == 450000 for prop in results)


def test_zero_min_price_is_inactive():
    cheap = make_property(id="cheap", price=50)
    criteria = FilterCriteria(min_price=0, max_price=None)

    assert _ids(properties_repo.filter_properties([cheap], criteria)) == ["cheap"]


def test_inverted_price_range_is_empty(sample_properties):
    criteria = FilterCriteria(min_price=600000, max_price=300000)

    assert properties_repo.filter_properties(sample_properties, criteria) == []


def test_type_filter_is_case_insensitive(sample_properties):
    lower = properties_repo.filter_properties(sample_properties, FilterCriteria(type="house"))
    title = properties_repo.filter_properties(sample_properties, FilterCriteria(type="House"))
    upper = properties_repo.filter_properties(sample_properties, FilterCriteria(type="HOUSE"))

    assert _ids(lower) == _ids(title) == _ids(upper) == ["prop1", "prop3"]


def test_postcode_filter_is_case_insensitive(sample_properties):
    lower = properties_repo.filter_properties(sample_properties, FilterCriteria(postcode="br1"))
    upper = properties_repo.filter_properties(sample_properties, FilterCriteria(postcode="BR1"))

    assert _ids(lower) == _ids(upper) == ["prop1"]


def test_blank_postcode_is_inactive(sample_properties):
    results = properties_repo.filter_properties(sample_properties, FilterCriteria(postcode="   "))

    assert len(results) == 3


def test_bedroom_bounds(sample_properties):
    at_least_four = properties_repo.filter_properties(sample_properties, FilterCriteria(min_beds=4))
    at_most_two = properties_repo.filter_properties(sample_properties, FilterCriteria(max_beds=2))
    between = properties_repo.filter_properties(sample_properties, FilterCriteria(min_beds=2, max_beds=4))

    assert _ids(at_least_four) == ["prop1", "prop3"]
    assert _ids(at_most_two) == ["prop2"]
    assert _ids(between) == ["prop1", "prop2"]


def test_fractional_bedroom_bounds_are_not_truncated(sample_properties):
    at_least = properties_repo.filter_properties(sample_properties, FilterCriteria(min_beds=2.5))
    at_most = properties_repo.filter_properties(sample_properties, FilterCriteria(max_beds="4.5"))

    assert _ids(at_least) == ["prop1", "prop3"]
    assert _ids(at_most) == ["prop1", "prop2"]


def test_max_beds_sentinel_means_no_limit():
    mansion = make_property(id="mansion", bedrooms=12)

    assert _ids(properties_repo.filter_properties([mansion], FilterCriteria(max_beds=10))) == ["mansion"]
    assert properties_repo.filter_properties([mansion], FilterCriteria(max_beds=9)) == []


def test_date_bounds_are_inclusive_by_day(sample_properties):
    same_day = FilterCriteria(date_from=date(2025, 10, 15), date_to=date(2025, 10, 15))
    midnight_upper_bound = FilterCriteria(date_to=datetime(2025, 10, 15, 0, 0))

    assert _ids(properties_repo.filter_properties(sample_properties, same_day)) == ["prop1"]
    assert _ids(properties_repo.filter_properties(sample_properties, midnight_upper_bound)) == ["prop1", "prop3"]


def test_date_from_ignores_time_of_day(sample_properties):
    criteria = FilterCriteria(date_from=datetime(2025, 11, 2, 18, 30))

    assert _ids(properties_repo.filter_properties(sample_properties, criteria)) == ["prop2"]


def test_all_filters_combined(sample_properties):
    criteria = FilterCriteria(
        type="House",
        min_price=400000,
        max_price=700000,
        min_beds=3,
        max_beds=5,
        postcode="BR1",
        date_from=date(2025, 9, 1),
        date_to=date(2025, 11, 1),
    )

    assert _ids(properties_repo.filter_properties(sample_properties, criteria)) == ["prop1"]


def test_malformed_values_turn_predicates_off(sample_properties):
    criteria = FilterCriteria.model_validate(
        {
            "type": 42,
            "minPrice": "not a number",
            "maxPrice": None,
            "minBeds": "lots",
            "maxBeds": [],
            "postcode": None,
            "dateFrom": "someday",
            "dateTo": 3.5,
        }
    )

    assert criteria.min_price is None
    assert criteria.date_from is None
    assert len(properties_repo.filter_properties(sample_properties, criteria)) == 3


def test_criteria_accept_form_strings():
    criteria = FilterCriteria.model_validate(
        {"minPrice": "£300,000", "maxBeds": "4", "dateFrom": "01/10/2025", "dateTo": "2025-11-15"}
    )

    assert criteria.min_price == 300000
    assert criteria.max_beds == 4
    assert criteria.date_from == date(2025, 10, 1)
    assert criteria.date_to == date(2025, 11, 15)


def test_get_property_and_form_options(sample_properties):
    assert properties_repo.get_property(sample_properties, "prop2").price == 325000
    assert properties_repo.get_property(sample_properties, "missing") is None
    assert properties_repo.list_types(sample_properties) == ["House", "Flat"]
    assert properties_repo.list_postcodes(sample_properties) == ["BR1", "NW1", "SE1"]
