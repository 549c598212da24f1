"""Pricing calculator configuration and result models.

Widget configurations are authored as camelCase JSON by the dashboard
(``basePricing``, ``minCharge``, ``freeRadius`` ...). Every model accepts
either the camelCase alias or the snake_case field name.

The enum-like fields (modifier ``type``/``condition``/``operation``, drive-time
``pricing.type``, display ``format``) are kept as plain strings so an unknown
name reaches the engine and is treated as a no-op instead of failing the
whole widget.
"""

from decimal import Decimal
from typing import Annotated, Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, PlainSerializer, computed_field
from pydantic.alias_generators import to_camel

# Decimals go out as JSON numbers rather than strings.
Money = Annotated[
    Decimal,
    PlainSerializer(lambda v: float(v), return_type=float, when_used="json"),
]


class _ConfigModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


class ServicePrice(_ConfigModel):
    amount: Money = Decimal("0")
    unit: str = ""
    min_charge: Optional[Money] = None


class BasePricing(_ConfigModel):
    # The dashboard writes this one key in snake_case.
    service_field: str = Field("service", alias="service_field")
    prices: Dict[str, ServicePrice] = Field(default_factory=dict)


class PricingCalculation(_ConfigModel):
    operation: str  # add | multiply | subtract
    amount: Money = Decimal("0")
    per_unit: bool = False


class PricingModifier(_ConfigModel):
    id: str
    type: str  # perUnit | conditional | threshold
    field: str
    condition: Optional[str] = None  # equals | greaterThan | lessThan | ...
    value: Any = None
    calculation: PricingCalculation


class DriveTimeTier(_ConfigModel):
    min_distance: Money = Decimal("0")
    max_distance: Optional[Money] = None
    rate: Money = Decimal("0")


class DriveTimePricing(_ConfigModel):
    type: str = "perMile"  # perMile | perMinute | tiered
    rate: Optional[Money] = None
    tiers: List[DriveTimeTier] = Field(default_factory=list)
    free_radius: Optional[Money] = None
    max_distance: Optional[Money] = None


class DriveTimeConfig(_ConfigModel):
    enabled: bool = False
    yard_address: str = ""
    address_field: str = "address"
    pricing: DriveTimePricing = Field(default_factory=DriveTimePricing)


class PricingRangeConfig(_ConfigModel):
    type: str = "multiplier"  # multiplier | percentage
    lower_bound: Money = Decimal("1")
    upper_bound: Money = Decimal("1.2")


class PricingDisplay(_ConfigModel):
    show_calculation: bool = False
    format: str = "fixed"  # fixed | range | minimum
    range_multiplier: Optional[Money] = None
    range_config: Optional[PricingRangeConfig] = None


class PricingCalculator(_ConfigModel):
    base_pricing: BasePricing
    modifiers: List[PricingModifier] = Field(default_factory=list)
    drive_time: Optional[DriveTimeConfig] = None
    display: PricingDisplay = Field(default_factory=PricingDisplay)


class AppliedModifier(_ConfigModel):
    id: str
    description: str
    amount: Money
    operation: str


class PricingBreakdown(_ConfigModel):
    base_amount: Money = Decimal("0")
    base_unit: str = ""
    base_quantity: Money = Decimal("0")
    modifier_total: Money = Decimal("0")
    subtotal: Money = Decimal("0")
    final_price: Money = Decimal("0")
    min_charge_applied: bool = False


class PricingResult(_ConfigModel):
    base_price: Money = Decimal("0")
    modifiers: List[AppliedModifier] = Field(default_factory=list)
    breakdown: PricingBreakdown = Field(default_factory=PricingBreakdown)

    @computed_field(alias="finalPrice")  # type: ignore[misc]
    @property
    def final_price(self) -> Money:
        return self.breakdown.final_price


class DriveTimeCost(_ConfigModel):
    distance: Money
    duration: Money
    cost: Money
    description: str
    within_free_radius: bool = False


class DistanceResult(_ConfigModel):
    distance_miles: Money = Decimal("0")
    duration_minutes: Money = Decimal("0")
    status: str = "OK"

    @property
    def ok(self) -> bool:
        return self.status == "OK"
