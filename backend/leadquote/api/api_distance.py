import logging

from fastapi import APIRouter, Depends

from ..schemas.pricing import DistanceResult
from ..services.distance_service import DistanceProvider
from .dependencies import get_provider

router = APIRouter(tags=["distance"])
logger = logging.getLogger(__name__)


@router.get("/distance", response_model=DistanceResult, response_model_by_alias=True)
async def get_distance(origin: str, destination: str, provider: DistanceProvider = Depends(get_provider)):
    """Driving distance (miles) and duration (minutes) between two addresses."""
    result = await provider.distance(origin, destination)
    if not result.ok:
        logger.warning("Distance lookup returned %s", result.status)
    return result
