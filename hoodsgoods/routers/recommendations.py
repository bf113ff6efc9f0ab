from fastapi import APIRouter, Depends, Query

from hoodsgoods.deps import get_recommendation_service
from hoodsgoods.schemas.reporting import PopularProduct
from hoodsgoods.services.recommendations import RecommendationService

router = APIRouter(prefix="/recommendations", tags=["recommendations"])


@router.get("/best-sellers", response_model=list[PopularProduct])
async def best_sellers(
    limit: int = Query(10, ge=1, le=100),
    time_window_days: int = Query(30, ge=1, le=3650, alias="timeWindowDays"),
    service: RecommendationService = Depends(get_recommendation_service),
):
    return await service.best_sellers(limit=limit, time_window_days=time_window_days)
