"""Render a pricing result the way a widget's display policy asks for."""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Dict, Optional, Tuple, Union

from leadquote.core.config import settings
from leadquote.schemas.pricing import PricingDisplay, PricingRangeConfig, PricingResult
from leadquote.schemas.quote import DisplayPrice

DISPLAY_FORMATS = ("fixed", "range", "minimum")

_WHOLE = Decimal("1")
_HUNDRED = Decimal("100")

CURRENCY_SYMBOLS: Dict[str, str] = {
    "USD": "$",
    "CAD": "$",
    "AUD": "$",
    "ZAR": "R",
    "EUR": "€",
    "GBP": "£",
}


def _round_whole(value: Decimal) -> Decimal:
    return Decimal(value).quantize(_WHOLE, rounding=ROUND_HALF_UP)


def format_price(amount: Union[Decimal, int, float], currency: Optional[str] = None) -> str:
    """Whole-unit currency string, e.g. ``$1,250``. Cents are rounded away."""
    code = (currency or settings.DEFAULT_CURRENCY or "USD").upper()
    symbol = CURRENCY_SYMBOLS.get(code, f"{code} ")
    whole = _round_whole(Decimal(str(amount)))
    sign = "-" if whole < 0 else ""
    return f"{sign}{symbol}{abs(int(whole)):,}"


def _upper_factor(range_multiplier: Optional[Decimal], range_config: Optional[PricingRangeConfig]) -> Decimal:
    if range_config is not None:
        if range_config.type == "multiplier":
            return range_config.upper_bound
        if range_config.type == "percentage":
            return range_config.upper_bound / _HUNDRED
    if range_multiplier:
        return Decimal(str(range_multiplier))
    return Decimal(str(settings.DEFAULT_RANGE_MULTIPLIER))


def calculate_price_range(
    result: PricingResult,
    range_multiplier: Optional[Decimal] = None,
    range_config: Optional[PricingRangeConfig] = None,
) -> Tuple[Decimal, Decimal]:
    """Return ``(min, max)``; ``min`` is always the final price.

    ``range_config`` takes precedence over ``range_multiplier`` when its type
    is recognised; the default multiplier is 1.2.
    """
    low = result.final_price
    high = _round_whole(low * _upper_factor(range_multiplier, range_config))
    return low, high


def format_result(
    result: PricingResult,
    display: PricingDisplay,
    currency: Optional[str] = None,
) -> Union[Decimal, Dict[str, Decimal], str]:
    """Plain rendering: the price, a ``{"min", "max"}`` dict, or "Starting at" text."""
    if display.format == "range":
        low, high = calculate_price_range(result, display.range_multiplier, display.range_config)
        return {"min": low, "max": high}
    if display.format == "minimum":
        return f"Starting at {format_price(result.final_price, currency)}"
    return result.final_price


def format_display_price(
    result: PricingResult,
    display: PricingDisplay,
    currency: Optional[str] = None,
) -> DisplayPrice:
    """:func:`format_result` plus display text. Unknown formats render as fixed."""
    if display.format not in DISPLAY_FORMATS:
        display = display.model_copy(update={"format": "fixed"})
    rendered = format_result(result, display, currency)
    if isinstance(rendered, dict):
        low, high = rendered["min"], rendered["max"]
        return DisplayPrice(
            format=display.format,
            text=f"{format_price(low, currency)} - {format_price(high, currency)}",
            min=low,
            max=high,
        )
    if isinstance(rendered, str):
        return DisplayPrice(format=display.format, text=rendered, amount=result.final_price)
    return DisplayPrice(format=display.format, text=format_price(rendered, currency), amount=rendered)
