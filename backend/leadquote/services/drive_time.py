"""Drive-time surcharge from the business yard to the customer address."""

from __future__ import annotations

import logging
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

from leadquote.schemas.pricing import DriveTimeConfig, DriveTimeCost, DriveTimePricing

from .distance_service import DistanceProvider, get_distance_provider
from .form_data import FormData, get_value
from .price_display import format_price

logger = logging.getLogger(__name__)

_CENT = Decimal("0.01")
_ZERO = Decimal("0")


def _num(value: Decimal) -> str:
    """Render a Decimal without trailing zeros (``15.00`` -> ``15``)."""
    if value == value.to_integral_value():
        return f"{value.quantize(Decimal('1')):f}"
    return f"{value.normalize():f}"


def _per_mile(distance: Decimal, duration: Decimal, pricing: DriveTimePricing) -> tuple[Decimal, str]:
    rate = pricing.rate or _ZERO
    if pricing.free_radius:
        billable = max(_ZERO, distance - pricing.free_radius)
        return (
            billable * rate,
            f"Drive time: {_num(billable)} billable miles × ${_num(rate)}/mile ({_num(pricing.free_radius)} miles free)",
        )
    return distance * rate, f"Drive time: {_num(distance)} miles × ${_num(rate)}/mile"


def _per_minute(distance: Decimal, duration: Decimal, pricing: DriveTimePricing) -> tuple[Decimal, str]:
    rate = pricing.rate or _ZERO
    return duration * rate, f"Drive time: {_num(duration)} minutes × ${_num(rate)}/minute"


def _tiered(distance: Decimal, duration: Decimal, pricing: DriveTimePricing) -> tuple[Decimal, str]:
    for tier in pricing.tiers:
        if distance >= tier.min_distance and (tier.max_distance is None or distance <= tier.max_distance):
            upper = f"-{_num(tier.max_distance)}" if tier.max_distance is not None else "+"
            return tier.rate, f"Drive time: {_num(tier.min_distance)}{upper} mile zone - ${_num(tier.rate)}"
    # Gaps between tiers fall through to no charge.
    logger.debug("No drive-time tier covers %s miles", distance)
    return _ZERO, ""


_PRICING = {
    "perMile": _per_mile,
    "perMinute": _per_minute,
    "tiered": _tiered,
}


def calculate_drive_time_cost(distance: Decimal, duration: Decimal, pricing: DriveTimePricing) -> DriveTimeCost:
    """Price a trip of ``distance`` miles taking ``duration`` minutes.

    The free radius is checked before the maximum distance, so an address
    inside the free radius is free even when the policy's ``maxDistance`` is
    smaller. Both cases cost 0; ``within_free_radius`` tells them apart.
    """
    distance = Decimal(str(distance))
    duration = Decimal(str(duration))
    if pricing.free_radius is not None and pricing.free_radius > _ZERO and distance <= pricing.free_radius:
        return DriveTimeCost(
            distance=distance,
            duration=duration,
            cost=_ZERO,
            description=f"Free delivery within {_num(pricing.free_radius)} miles",
            within_free_radius=True,
        )
    if pricing.max_distance is not None and pricing.max_distance > _ZERO and distance > pricing.max_distance:
        return DriveTimeCost(
            distance=distance,
            duration=duration,
            cost=_ZERO,
            description=f"Service not available beyond {_num(pricing.max_distance)} miles",
            within_free_radius=False,
        )

    price = _PRICING.get(pricing.type)
    cost, description = price(distance, duration, pricing) if price else (_ZERO, "")
    return DriveTimeCost(
        distance=distance,
        duration=duration,
        cost=cost.quantize(_CENT, rounding=ROUND_HALF_UP),
        description=description,
        within_free_radius=False,
    )


async def get_drive_time_cost(
    form_data: FormData,
    config: Optional[DriveTimeConfig],
    provider: Optional[DistanceProvider] = None,
) -> Optional[DriveTimeCost]:
    """Look up the customer's distance and price it.

    Returns ``None`` when drive time is disabled or has no yard address, when
    the customer has not entered an address, or when the distance lookup
    fails for any reason.
    """
    if config is None or not config.enabled or not (config.yard_address or "").strip():
        return None
    address = get_value(form_data, config.address_field)
    if not isinstance(address, str) or not address.strip():
        return None

    provider = provider or get_distance_provider()
    try:
        result = await provider.distance(config.yard_address.strip(), address.strip())
    except Exception as exc:
        logger.error("Drive time calculation error: %s", exc)
        return None
    if not result.ok:
        logger.warning("Drive time calculation failed: %s", result.status)
        return None
    return calculate_drive_time_cost(result.distance_miles, result.duration_minutes, config.pricing)


def format_drive_time_cost(cost: DriveTimeCost, currency: Optional[str] = None) -> str:
    if cost.within_free_radius:
        return "Free delivery"
    if cost.cost == _ZERO:
        return "Service not available"
    return format_price(cost.cost, currency)
