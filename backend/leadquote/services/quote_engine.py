"""Quote engine: turn a widget's pricing calculator and form answers into a price.

Two entry points share one pure computation:

* :func:`calculate_price_sync` runs on every form change for live feedback
  and never performs I/O.
* :func:`calculate_price` is awaited once at the final quote step; it also
  looks up the drive-time surcharge and appends it as a ``drive_time``
  modifier before the minimum charge is applied.

An unselected or unknown service yields the empty result (all zeros, no
modifiers). That means "no estimate yet", not an error.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, List, Mapping, Optional, Sequence, Tuple, Union

from leadquote.schemas.pricing import (
    AppliedModifier,
    DriveTimeCost,
    PricingBreakdown,
    PricingCalculator,
    PricingResult,
    ServicePrice,
)

from .distance_service import DistanceProvider
from .drive_time import get_drive_time_cost
from .form_data import FormData, get_value
from .modifiers import apply_modifiers
from .units import resolve_quantity

logger = logging.getLogger(__name__)

_ZERO = Decimal("0")
_ONE = Decimal("1")

DRIVE_TIME_MODIFIER_ID = "drive_time"

CalculatorLike = Union[PricingCalculator, Mapping[str, Any]]


@dataclass
class _Priced:
    """Intermediate state between the modifier fold and the minimum charge."""

    service: ServicePrice
    base_quantity: Decimal
    base_price: Decimal
    subtotal: Decimal
    modifiers: List[AppliedModifier]


def _as_calculator(config: CalculatorLike) -> PricingCalculator:
    if isinstance(config, PricingCalculator):
        return config
    return PricingCalculator.model_validate(config)


def empty_result() -> PricingResult:
    return PricingResult(
        base_price=_ZERO,
        modifiers=[],
        breakdown=PricingBreakdown(
            base_amount=_ZERO,
            base_unit="",
            base_quantity=_ZERO,
            modifier_total=_ZERO,
            subtotal=_ZERO,
            final_price=_ZERO,
            min_charge_applied=False,
        ),
    )


def selected_service_key(form_data: FormData, service_field: str) -> Optional[str]:
    """Identifier of the chosen service; multi-selects use their first choice."""
    value = get_value(form_data, service_field)
    if isinstance(value, (list, tuple)):
        value = next((v for v in value if v not in (None, "")), None)
    if value is None or isinstance(value, (dict, bool)):
        return None
    key = str(value)
    return key if key.strip() else None


def resolve_base_price(form_data: FormData, calculator: PricingCalculator) -> Optional[Tuple[ServicePrice, Decimal, Decimal]]:
    """Return ``(service price, base quantity, base price)`` or ``None``."""
    key = selected_service_key(form_data, calculator.base_pricing.service_field)
    if key is None:
        return None
    service = calculator.base_pricing.prices.get(key)
    if service is None:
        return None
    quantity = resolve_quantity(form_data, service.unit)
    return service, quantity, quantity * service.amount


def modifier_total(modifiers: Sequence[AppliedModifier], base_price: Decimal) -> Decimal:
    """Display-only dollar total of the applied modifiers.

    Subtract steps count negative and ``multiply`` steps are reported as
    ``(factor - 1) * base_price``. The final price is never derived from
    this figure.
    """
    total = _ZERO
    for mod in modifiers:
        if mod.operation == "add":
            total += mod.amount
        elif mod.operation == "subtract":
            total -= mod.amount
        elif mod.operation == "multiply":
            total += (mod.amount - _ONE) * base_price
    return total


def _price_modifiers(form_data: FormData, calculator: PricingCalculator) -> Optional[_Priced]:
    resolved = resolve_base_price(form_data, calculator)
    if resolved is None:
        return None
    service, base_quantity, base_price = resolved
    subtotal, applied = apply_modifiers(form_data, calculator.modifiers, base_price, base_quantity)
    return _Priced(
        service=service,
        base_quantity=base_quantity,
        base_price=base_price,
        subtotal=subtotal,
        modifiers=applied,
    )


def _finalize(priced: _Priced) -> PricingResult:
    final_price = priced.subtotal
    min_charge_applied = False
    min_charge = priced.service.min_charge
    if min_charge and priced.subtotal < min_charge:
        final_price = min_charge
        min_charge_applied = True

    result = PricingResult(
        base_price=priced.base_price,
        modifiers=list(priced.modifiers),
        breakdown=PricingBreakdown(
            base_amount=priced.service.amount,
            base_unit=priced.service.unit,
            base_quantity=priced.base_quantity,
            modifier_total=modifier_total(priced.modifiers, priced.base_price),
            subtotal=priced.subtotal,
            final_price=max(_ZERO, final_price),
            min_charge_applied=min_charge_applied,
        ),
    )
    logger.debug(
        "Quote priced",
        extra={
            "base_price": str(result.base_price),
            "modifiers": [m.id for m in result.modifiers],
            "subtotal": str(priced.subtotal),
            "final_price": str(result.final_price),
            "min_charge_applied": min_charge_applied,
        },
    )
    return result


def calculate_price_sync(form_data: FormData, config: CalculatorLike) -> PricingResult:
    """Price ``form_data`` without drive time. Safe to call on every keystroke."""
    calculator = _as_calculator(config)
    priced = _price_modifiers(form_data or {}, calculator)
    if priced is None:
        return empty_result()
    return _finalize(priced)


async def calculate_price(
    form_data: FormData,
    config: CalculatorLike,
    provider: Optional[DistanceProvider] = None,
) -> PricingResult:
    """Price ``form_data`` including the drive-time surcharge, if configured.

    A drive-time lookup that fails, or that costs nothing, leaves the result
    identical to :func:`calculate_price_sync`.
    """
    result, _ = await calculate_price_with_drive_time(form_data, config, provider)
    return result


async def calculate_price_with_drive_time(
    form_data: FormData,
    config: CalculatorLike,
    provider: Optional[DistanceProvider] = None,
) -> Tuple[PricingResult, Optional[DriveTimeCost]]:
    """Like :func:`calculate_price` but also returns the drive-time cost (or ``None``)."""
    calculator = _as_calculator(config)
    form_data = form_data or {}
    priced = _price_modifiers(form_data, calculator)
    if priced is None:
        return empty_result(), None

    drive_time = None
    if calculator.drive_time is not None:
        drive_time = await get_drive_time_cost(form_data, calculator.drive_time, provider)
        if drive_time is not None and drive_time.cost > _ZERO:
            priced.modifiers.append(
                AppliedModifier(
                    id=DRIVE_TIME_MODIFIER_ID,
                    description=drive_time.description,
                    amount=drive_time.cost,
                    operation="add",
                )
            )
            priced.subtotal += drive_time.cost
    return _finalize(priced), drive_time
