"""Display formatting helpers shared by the HTML views."""
from __future__ import annotations

from datetime import date, datetime

CURRENCY_SYMBOL = "£"
MONTHS = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)


def format_price(value: int | float) -> str:
    """Format an amount as pounds with thousands separators, e.g. ``£450,000``."""

    if isinstance(value, float) and value.is_integer():
        value = int(value)
    if isinstance(value, float):
        return f"{CURRENCY_SYMBOL}{value:,.2f}"
    return f"{CURRENCY_SYMBOL}{value:,}"


def format_date(value: date | datetime | str, style: str = "short") -> str:
    """Render a day in en-GB order: ``15 Oct 2025`` (short) or ``15 October 2025`` (long)."""

    if isinstance(value, str):
        value = date.fromisoformat(value[:10])
    if isinstance(value, datetime):
        value = value.date()

    month = MONTHS[value.month - 1]
    if style != "long":
        month = month[:3]
    return f"{value.day} {month} {value.year}"


def image_path(path: str, base_url: str = "/") -> str:
    """Join an image path onto the configured base URL without doubling slashes."""

    if path.startswith(("http://", "https://")):
        return path
    base = base_url if base_url.endswith("/") else f"{base_url}/"
    return base + path.lstrip("/")


def results_summary(count: int, searched: bool) -> str:
    """Heading text for the results list."""

    if not searched:
        return f"Showing all {count} properties"
    noun = "property" if count == 1 else "properties"
    return f"{count} {noun} found"
