import logging

from fastapi import APIRouter, Depends

from ..schemas.quote import QuoteOut, QuoteRequest
from ..services.distance_service import DistanceProvider
from ..services.drive_time import format_drive_time_cost
from ..services.price_display import DISPLAY_FORMATS, format_display_price
from ..services.quote_engine import calculate_price_sync, calculate_price_with_drive_time
from ..utils import error_response
from .dependencies import get_provider

router = APIRouter(tags=["quotes"])
logger = logging.getLogger(__name__)


def _display_for(body: QuoteRequest):
    display = body.calculator.display
    if body.display_format is None:
        return display
    if body.display_format not in DISPLAY_FORMATS:
        raise error_response(
            "Unknown display format",
            {"display_format": "must be one of fixed, range, minimum"},
        )
    return display.model_copy(update={"format": body.display_format})


@router.post(
    "/quotes/estimate",
    response_model=QuoteOut,
    response_model_by_alias=True,
)
def estimate_quote(body: QuoteRequest):
    """Live estimate for a form in progress (no drive-time lookup)."""
    display = _display_for(body)
    result = calculate_price_sync(body.form_data, body.calculator)
    return QuoteOut(result=result, display=format_display_price(result, display))


@router.post(
    "/quotes/calculate",
    response_model=QuoteOut,
    response_model_by_alias=True,
)
async def calculate_quote(body: QuoteRequest, provider: DistanceProvider = Depends(get_provider)):
    """Final quote, including the drive-time surcharge when configured."""
    display = _display_for(body)
    result, drive_time = await calculate_price_with_drive_time(body.form_data, body.calculator, provider)
    logger.info(
        "Final quote calculated",
        extra={"final_price": str(result.final_price), "drive_time": bool(drive_time)},
    )
    return QuoteOut(
        result=result,
        display=format_display_price(result, display),
        drive_time=drive_time,
        drive_time_label=format_drive_time_cost(drive_time) if drive_time else None,
    )
