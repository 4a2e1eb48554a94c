"""Schemas for catalog properties and search criteria."""
from __future__ import annotations

import math
from datetime import date, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, NonNegativeFloat, NonNegativeInt, field_validator
from pydantic.alias_generators import to_camel

ANY_TYPE = "any"
NO_MAX_BEDS = 10


class CamelModel(BaseModel):
    """Base model that speaks camelCase on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Property(CamelModel):
    """A single catalog listing. Frozen because the fixture never changes at runtime."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    id: str
    type: str
    price: NonNegativeInt | NonNegativeFloat
    bedrooms: NonNegativeInt
    postcode: str
    location: str
    description: str = ""
    long_description: str = ""
    date_added: date
    images: tuple[str, ...] = Field(min_length=1)
    floor_plan: str
    map_url: str | None = None
    address: str | None = None
    tenure: str | None = None
    council_tax_band: str | None = None

    @field_validator("date_added", mode="before")
    @classmethod
    def _strip_time(cls, value: object) -> object:
        """Accept full timestamps and keep only the calendar day."""

        if isinstance(value, datetime):
            return value.date()
        if isinstance(value, str) and "T" in value:
            return datetime.fromisoformat(value.replace("Z", "+00:00")).date()
        return value


class FilterCriteria(CamelModel):
    """Search form state.

    Malformed values are coerced to ``None`` (or the field's neutral value) so
    that a bad input turns its predicate off instead of failing the search.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    type: str | None = ANY_TYPE
    min_price: float | None = 100_000
    max_price: float | None = 1_000_000
    min_beds: float | None = 0
    max_beds: float | None = NO_MAX_BEDS
    postcode: str | None = ""
    date_from: date | None = None
    date_to: date | None = None

    @field_validator("type", "postcode", mode="before")
    @classmethod
    def _coerce_text(cls, value: object) -> object:
        if value is None or isinstance(value, str):
            return value
        return None

    @field_validator("min_price", "max_price", mode="before")
    @classmethod
    def _coerce_price(cls, value: object) -> float | None:
        number = _to_number(value)
        if number is None or math.isnan(number):
            return None
        return number

    @field_validator("min_beds", "max_beds", mode="before")
    @classmethod
    def _coerce_beds(cls, value: object) -> float | None:
        # Fractional bounds stay fractional: a minimum of 2.5 means 3 or more.
        number = _to_number(value)
        if number is None or math.isnan(number) or math.isinf(number):
            return None
        return number

    @field_validator("date_from", "date_to", mode="before")
    @classmethod
    def _coerce_date(cls, value: object) -> date | None:
        if value is None or value == "":
            return None
        if isinstance(value, datetime):
            return value.date()
        if isinstance(value, date):
            return value
        if isinstance(value, str):
            text = value.strip()
            try:
                return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
            except ValueError:
                pass
            try:
                return datetime.strptime(text, "%d/%m/%Y").date()
            except ValueError:
                return None
        return None


def _to_number(value: Any) -> float | None:
    """Best-effort numeric conversion used by the criteria validators."""

    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        cleaned = value.strip().replace(",", "").lstrip("£")
        if not cleaned:
            return None
        try:
            return float(cleaned)
        except ValueError:
            return None
    return None


class PropertyDetail(Property):
    """Property with its description fields passed through the sanitizer."""

    description_html: str = ""
    long_description_html: str = ""


class PropertyListResponse(CamelModel):
    results: list[Property]
    count: int
