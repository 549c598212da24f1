import asyncio
import logging
from decimal import Decimal

from leadquote.schemas.pricing import DriveTimeConfig, DriveTimePricing
from leadquote.services import drive_time
from leadquote.services.distance_service import StaticDistanceProvider


def pricing(**kw) -> DriveTimePricing:
    return DriveTimePricing.model_validate(kw)


def config(**pricing_kw) -> DriveTimeConfig:
    return DriveTimeConfig.model_validate(
        {
            "enabled": True,
            "yardAddress": "100 Yard Rd, Austin TX",
            "addressField": "address",
            "pricing": pricing_kw or {"type": "perMile", "rate": 2},
        }
    )


def test_free_radius():
    cost = drive_time.calculate_drive_time_cost(8, 15, pricing(type="perMile", rate=2, freeRadius=10))
    assert cost.cost == Decimal("0")
    assert cost.within_free_radius is True
    assert cost.description == "Free delivery within 10 miles"


def test_free_radius_takes_precedence_over_max_distance():
    cost = drive_time.calculate_drive_time_cost(
        8, 15, pricing(type="perMile", rate=2, freeRadius=10, maxDistance=5)
    )
    assert cost.within_free_radius is True


def test_max_distance_cutoff():
    cost = drive_time.calculate_drive_time_cost(60, 80, pricing(type="perMile", rate=2, maxDistance=50))
    assert cost.cost == Decimal("0")
    assert cost.within_free_radius is False
    assert "not available beyond 50 miles" in cost.description


def test_per_mile_bills_only_beyond_free_radius():
    cost = drive_time.calculate_drive_time_cost(25, 40, pricing(type="perMile", rate=2, freeRadius=10))
    assert cost.cost == Decimal("30.00")
    assert cost.description == "Drive time: 15 billable miles × $2/mile (10 miles free)"


def test_per_mile_without_free_radius_rounds_to_cents():
    cost = drive_time.calculate_drive_time_cost(Decimal("12.345"), 20, pricing(type="perMile", rate=1))
    assert cost.cost == Decimal("12.35")


def test_per_minute():
    cost = drive_time.calculate_drive_time_cost(20, 35, pricing(type="perMinute", rate="0.5"))
    assert cost.cost == Decimal("17.50")
    assert cost.description == "Drive time: 35 minutes × $0.5/minute"


def test_tiered_is_flat_per_zone():
    tiers = [
        {"minDistance": 0, "maxDistance": 15, "rate": 25},
        {"minDistance": 15, "maxDistance": 30, "rate": 50},
        {"minDistance": 40, "rate": 100},
    ]
    policy = pricing(type="tiered", tiers=tiers)
    assert drive_time.calculate_drive_time_cost(20, 30, policy).cost == Decimal("50")
    assert drive_time.calculate_drive_time_cost(15, 30, policy).cost == Decimal("25")
    far = drive_time.calculate_drive_time_cost(75, 90, policy)
    assert far.cost == Decimal("100")
    assert far.description == "Drive time: 40+ mile zone - $100"


def test_tiered_gap_costs_nothing():
    policy = pricing(type="tiered", tiers=[{"minDistance": 0, "maxDistance": 10, "rate": 25}, {"minDistance": 20, "rate": 60}])
    gap = drive_time.calculate_drive_time_cost(15, 30, policy)
    assert gap.cost == Decimal("0")
    assert gap.within_free_radius is False


def test_get_drive_time_cost_uses_provider():
    cfg = config(type="perMile", rate=2, freeRadius=10)
    provider = StaticDistanceProvider(25, 40)
    cost = asyncio.run(drive_time.get_drive_time_cost({"address": " 9 Elm St "}, cfg, provider))
    assert cost is not None
    assert cost.cost == Decimal("30.00")
    assert cost.distance == Decimal("25")


def test_get_drive_time_cost_returns_none_when_not_applicable():
    provider = StaticDistanceProvider(25, 40)
    disabled = config().model_copy(update={"enabled": False})
    no_yard = config().model_copy(update={"yard_address": "  "})
    for cfg, data in (
        (None, {"address": "9 Elm St"}),
        (disabled, {"address": "9 Elm St"}),
        (no_yard, {"address": "9 Elm St"}),
        (config(), {}),
        (config(), {"address": "   "}),
        (config(), {"address": 42}),
    ):
        assert asyncio.run(drive_time.get_drive_time_cost(data, cfg, provider)) is None


def test_get_drive_time_cost_failed_lookup_is_none(caplog):
    caplog.set_level(logging.WARNING, logger="leadquote.services.drive_time")
    provider = StaticDistanceProvider(status="ZERO_RESULTS")
    assert asyncio.run(drive_time.get_drive_time_cost({"address": "Atlantis"}, config(), provider)) is None
    assert any("ZERO_RESULTS" in r.getMessage() for r in caplog.records)


def test_get_drive_time_cost_swallows_provider_exceptions():
    class Broken:
        async def distance(self, origin, destination):
            raise RuntimeError("boom")

    assert asyncio.run(drive_time.get_drive_time_cost({"address": "9 Elm St"}, config(), Broken())) is None


def test_format_drive_time_cost():
    free = drive_time.calculate_drive_time_cost(5, 9, pricing(type="perMile", rate=2, freeRadius=10))
    cut = drive_time.calculate_drive_time_cost(60, 9, pricing(type="perMile", rate=2, maxDistance=50))
    paid = drive_time.calculate_drive_time_cost(25, 9, pricing(type="perMile", rate=2, freeRadius=10))
    assert drive_time.format_drive_time_cost(free) == "Free delivery"
    assert drive_time.format_drive_time_cost(cut) == "Service not available"
    assert drive_time.format_drive_time_cost(paid, "USD") == "$30"
