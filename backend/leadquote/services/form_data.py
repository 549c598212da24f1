"""Typed accessors over the flat form-data map collected by a widget.

Form data is untrusted: fields can be missing, empty, or carry the wrong
type. Every accessor here degrades to a zero/empty value instead of raising.
"""

from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Any, Mapping, Optional

FormData = Mapping[str, Any]

_ZERO = Decimal("0")

# Larger answers are treated as garbage; the cap keeps every product and
# whole-dollar rounding inside the default 28-digit decimal context.
MAX_FORM_NUMBER = Decimal("1e12")


def _parse(value: Any) -> Optional[Decimal]:
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, (int, float, str)) and not isinstance(value, bool):
        text = str(value).strip()
        if not text:
            return None
        try:
            result = Decimal(text)
        except (InvalidOperation, ValueError, TypeError):
            return None
    else:
        return None
    if not result.is_finite() or abs(result) > MAX_FORM_NUMBER:
        return None
    return result


def to_decimal(value: Any, default: Decimal = _ZERO) -> Decimal:
    """Coerce ``value`` to a finite Decimal.

    Booleans count as 1/0. Blank strings, anything non-numeric, NaN,
    infinities and magnitudes above ``MAX_FORM_NUMBER`` fall back to
    ``default``.
    """
    if isinstance(value, bool):
        return Decimal(int(value))
    result = _parse(value)
    return default if result is None else result


def is_numeric(value: Any) -> bool:
    return _parse(value) is not None


def is_present(form_data: Optional[FormData], field: str) -> bool:
    return bool(form_data) and form_data.get(field) is not None


def get_value(form_data: Optional[FormData], field: str) -> Any:
    if not form_data:
        return None
    return form_data.get(field)


def get_number(form_data: Optional[FormData], field: str, default: Decimal = _ZERO) -> Decimal:
    return to_decimal(get_value(form_data, field), default)
