"""Map an abstract pricing unit to the form field that holds its quantity."""

from __future__ import annotations

from decimal import Decimal
from typing import Dict, Tuple

from .form_data import FormData, get_number, is_present

UNIT_FIELD_ALIASES: Dict[str, Tuple[str, ...]] = {
    "linear_foot": ("linearFeet", "linear_feet", "feet"),
    "linear_feet": ("linearFeet", "linear_feet", "feet"),
    "sqft": ("sqft", "square_feet", "area"),
    "square_feet": ("sqft", "square_feet", "area"),
    "cubic_yard": ("cubic_yards", "yards"),
    "days": ("days", "rentalDays", "duration"),
    "hours": ("hours", "duration"),
    "units": ("quantity", "count", "units"),
}


def candidate_fields(unit: str) -> Tuple[str, ...]:
    """Fields to probe for ``unit``; unknown units name their own field."""
    return UNIT_FIELD_ALIASES.get(unit, (unit,))


def resolve_quantity(form_data: FormData, unit: str) -> Decimal:
    """Return the quantity for ``unit`` from the first populated candidate field.

    The first field that is present wins even when its value does not parse,
    in which case the quantity is 0.
    """
    if not unit:
        return Decimal("0")
    for field in candidate_fields(unit):
        if is_present(form_data, field):
            return get_number(form_data, field)
    return Decimal("0")
