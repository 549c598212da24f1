from .pricing import (
    AppliedModifier,
    BasePricing,
    DistanceResult,
    DriveTimeConfig,
    DriveTimeCost,
    DriveTimePricing,
    DriveTimeTier,
    PricingBreakdown,
    PricingCalculation,
    PricingCalculator,
    PricingDisplay,
    PricingModifier,
    PricingRangeConfig,
    PricingResult,
    ServicePrice,
)
from .quote import DisplayPrice, QuoteOut, QuoteRequest

__all__ = [
    "AppliedModifier",
    "BasePricing",
    "DisplayPrice",
    "DistanceResult",
    "DriveTimeConfig",
    "DriveTimeCost",
    "DriveTimePricing",
    "DriveTimeTier",
    "PricingBreakdown",
    "PricingCalculation",
    "PricingCalculator",
    "PricingDisplay",
    "PricingModifier",
    "PricingRangeConfig",
    "PricingResult",
    "QuoteOut",
    "QuoteRequest",
    "ServicePrice",
]
