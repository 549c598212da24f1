from typing import Any, Dict, Optional

from pydantic import Field

from .pricing import DriveTimeCost, Money, PricingCalculator, PricingResult, _ConfigModel


class QuoteRequest(_ConfigModel):
    form_data: Dict[str, Any] = Field(default_factory=dict)
    calculator: PricingCalculator
    display_format: Optional[str] = None


class DisplayPrice(_ConfigModel):
    format: str
    text: str
    amount: Optional[Money] = None
    min: Optional[Money] = None
    max: Optional[Money] = None


class QuoteOut(_ConfigModel):
    result: PricingResult
    display: DisplayPrice
    drive_time: Optional[DriveTimeCost] = None
    # "Free delivery", "Service not available" or the surcharge, for the widget
    drive_time_label: Optional[str] = None
