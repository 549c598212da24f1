"""Driving distance between the business yard and a customer address.

Providers expose ``async distance(origin, destination) -> DistanceResult`` and
never raise: every failure is reported through a non-``OK`` status so the
quote engine can fall back to "no drive-time charge".

- :class:`GoogleDistanceProvider` calls the Google Distance Matrix API
  (imperial units) and caches successful lookups in Redis.
- :class:`MockDistanceProvider` derives a stable 5-55 mile distance from the
  address pair, for local development and environments without a key.
- :class:`StaticDistanceProvider` always answers with a fixed result.

:func:`get_distance_provider` picks one based on ``DISTANCE_PROVIDER``.
"""

from __future__ import annotations

import hashlib
import logging
from decimal import ROUND_HALF_UP, Decimal
from typing import Protocol

import httpx

from leadquote.core.config import settings
from leadquote.schemas.pricing import DistanceResult
from leadquote.utils.redis_cache import cache_distance, distance_cache_key, get_cached_distance

logger = logging.getLogger(__name__)

DISTANCE_MATRIX_URL = "https://maps.googleapis.com/maps/api/distancematrix/json"
METERS_TO_MILES = Decimal("0.000621371")

STATUS_OK = "OK"
STATUS_INVALID_REQUEST = "INVALID_REQUEST"
STATUS_UNKNOWN_ERROR = "UNKNOWN_ERROR"
STATUS_TIMEOUT = "TIMEOUT"

_CENT = Decimal("0.01")
_MINUTE = Decimal("1")


class DistanceProvider(Protocol):
    async def distance(self, origin: str, destination: str) -> DistanceResult:
        ...


def _failure(status: str) -> DistanceResult:
    return DistanceResult(distance_miles=Decimal("0"), duration_minutes=Decimal("0"), status=status)


def parse_distance_matrix(data: dict) -> DistanceResult:
    """Convert a Distance Matrix JSON payload into a :class:`DistanceResult`."""
    top_status = data.get("status") or STATUS_UNKNOWN_ERROR
    if top_status != STATUS_OK:
        return _failure(top_status)
    try:
        element = data["rows"][0]["elements"][0]
    except (KeyError, IndexError, TypeError):
        return _failure(STATUS_UNKNOWN_ERROR)
    element_status = element.get("status") or STATUS_UNKNOWN_ERROR
    if element_status != STATUS_OK:
        return _failure(element_status)
    meters = Decimal(str((element.get("distance") or {}).get("value") or 0))
    seconds = Decimal(str((element.get("duration") or {}).get("value") or 0))
    miles = (meters * METERS_TO_MILES).quantize(_CENT, rounding=ROUND_HALF_UP)
    minutes = (seconds / Decimal("60")).quantize(_MINUTE, rounding=ROUND_HALF_UP)
    return DistanceResult(distance_miles=miles, duration_minutes=minutes, status=STATUS_OK)


class GoogleDistanceProvider:
    def __init__(self, api_key: str, timeout: float = 8.0, cache_ttl: int = 900) -> None:
        self.api_key = api_key
        self.timeout = timeout
        self.cache_ttl = cache_ttl

    async def distance(self, origin: str, destination: str) -> DistanceResult:
        if not origin or not origin.strip() or not destination or not destination.strip():
            return _failure(STATUS_INVALID_REQUEST)

        key = distance_cache_key(origin, destination)
        cached = get_cached_distance(key)
        if cached is not None:
            return DistanceResult(distance_miles=cached[0], duration_minutes=cached[1], status=STATUS_OK)

        params = {
            "units": "imperial",
            "mode": "driving",
            "origins": origin.strip(),
            "destinations": destination.strip(),
            "key": self.api_key,
        }
        try:
            async with httpx.AsyncClient(timeout=httpx.Timeout(self.timeout, connect=min(self.timeout, 3.0))) as http:
                res = await http.get(DISTANCE_MATRIX_URL, params=params)
                res.raise_for_status()
                data = res.json()
        except httpx.TimeoutException as exc:
            logger.warning("Distance Matrix timed out after %ss: %s", self.timeout, exc)
            return _failure(STATUS_TIMEOUT)
        except Exception as exc:
            logger.warning("Distance Matrix request failed: %s", exc)
            return _failure(STATUS_UNKNOWN_ERROR)

        result = parse_distance_matrix(data if isinstance(data, dict) else {})
        if result.ok:
            cache_distance(key, result.distance_miles, result.duration_minutes, self.cache_ttl)
        else:
            logger.warning("Distance Matrix returned status %s", result.status)
        return result


class MockDistanceProvider:
    """Deterministic stand-in for the Distance Matrix API."""

    async def distance(self, origin: str, destination: str) -> DistanceResult:
        origin = (origin or "").strip()
        destination = (destination or "").strip()
        if not origin or not destination or origin.lower() == destination.lower():
            return DistanceResult(distance_miles=Decimal("0"), duration_minutes=Decimal("0"), status=STATUS_OK)
        digest = hashlib.sha256(f"{origin.lower()}|{destination.lower()}".encode("utf-8")).digest()
        spread = int.from_bytes(digest[:4], "big") / 0xFFFFFFFF
        traffic = int.from_bytes(digest[4:8], "big") / 0xFFFFFFFF
        miles = Decimal(str(5 + spread * 50)).quantize(_CENT, rounding=ROUND_HALF_UP)
        minutes = (miles * Decimal("1.5") + Decimal(str(traffic * 10))).quantize(_MINUTE, rounding=ROUND_HALF_UP)
        return DistanceResult(distance_miles=miles, duration_minutes=minutes, status=STATUS_OK)


class StaticDistanceProvider:
    def __init__(self, distance_miles: float | Decimal = 0, duration_minutes: float | Decimal = 0, status: str = STATUS_OK) -> None:
        self.result = DistanceResult(
            distance_miles=Decimal(str(distance_miles)),
            duration_minutes=Decimal(str(duration_minutes)),
            status=status,
        )

    async def distance(self, origin: str, destination: str) -> DistanceResult:
        return self.result


def get_distance_provider() -> DistanceProvider:
    """Return the provider selected by settings.

    ``auto`` uses Google when an API key is configured, otherwise the mock.
    """
    choice = (settings.DISTANCE_PROVIDER or "auto").lower()
    api_key = settings.maps_api_key
    if choice == "mock" or (choice == "auto" and not api_key):
        return MockDistanceProvider()
    if not api_key:
        logger.warning("DISTANCE_PROVIDER=%s but no Google Maps key is configured; using mock distances", choice)
        return MockDistanceProvider()
    return GoogleDistanceProvider(
        api_key,
        timeout=settings.DISTANCE_TIMEOUT,
        cache_ttl=settings.DISTANCE_CACHE_TTL,
    )
