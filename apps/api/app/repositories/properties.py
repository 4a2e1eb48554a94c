"""Query helpers over the in-memory property catalog."""
from __future__ import annotations

from typing import Callable, Iterable, Sequence

from ..schemas.properties import ANY_TYPE, NO_MAX_BEDS, FilterCriteria, Property

Predicate = Callable[[Property], bool]


def filter_properties(
    properties: Sequence[Property],
    criteria: FilterCriteria,
) -> list[Property]:
    """Return the properties matching every active predicate.

    Each criterion only takes part when it is "active": a price of 0 counts as
    unset, a minimum of 0 beds and a maximum of 10 beds mean "no limit", and
    blank type/postcode values are ignored. The result keeps catalog order and
    the input sequence is left untouched.
    """

    predicates = _build_predicates(criteria)
    return [prop for prop in properties if all(check(prop) for check in predicates)]


def get_property(properties: Iterable[Property], property_id: str) -> Property | None:
    """Look up a property by identifier."""

    for prop in properties:
        if prop.id == property_id:
            return prop
    return None


def list_types(properties: Iterable[Property]) -> list[str]:
    """Distinct property types in first-seen order."""

    return _distinct(prop.type for prop in properties)


def list_postcodes(properties: Iterable[Property]) -> list[str]:
    """Distinct postcode areas, sorted for the search form."""

    return sorted(_distinct(prop.postcode for prop in properties))


def _build_predicates(criteria: FilterCriteria) -> list[Predicate]:
    predicates: list[Predicate] = []

    if criteria.type and criteria.type != ANY_TYPE:
        wanted_type = criteria.type.lower()
        predicates.append(lambda prop: prop.type.lower() == wanted_type)

    if criteria.min_price:
        min_price = criteria.min_price
        predicates.append(lambda prop: prop.price >= min_price)

    if criteria.max_price:
        max_price = criteria.max_price
        predicates.append(lambda prop: prop.price <= max_price)

    if criteria.min_beds is not None and criteria.min_beds > 0:
        min_beds = criteria.min_beds
        predicates.append(lambda prop: prop.bedrooms >= min_beds)

    if criteria.max_beds is not None and criteria.max_beds < NO_MAX_BEDS:
        max_beds = criteria.max_beds
        predicates.append(lambda prop: prop.bedrooms <= max_beds)

    if criteria.postcode and criteria.postcode.strip():
        wanted_postcode = criteria.postcode.lower()
        predicates.append(lambda prop: prop.postcode.lower() == wanted_postcode)

    # Dates are compared by calendar day, which covers both the midnight
    # floor on the lower bound and the end-of-day ceiling on the upper one.
    if criteria.date_from is not None:
        date_from = criteria.date_from
        predicates.append(lambda prop: prop.date_added >= date_from)

    if criteria.date_to is not None:
        date_to = criteria.date_to
        predicates.append(lambda prop: prop.date_added <= date_to)

    return predicates


def _distinct(values: Iterable[str]) -> list[str]:
    seen: dict[str, None] = {}
    for value in values:
        seen.setdefault(value, None)
    return list(seen)
