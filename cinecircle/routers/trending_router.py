from fastapi import APIRouter, Depends
from typing import Optional

from ..config import settings
from ..schemas.activity import TrendingResponse
from ..dependencies import get_activity_repository, get_limit
from ..services.trending_service import TrendingService

router = APIRouter()

async def get_trending_service(activity_repo = Depends(get_activity_repository)) -> TrendingService:
    return TrendingService(
        activity_repo,
        scan_window=settings.TRENDING_SCAN_WINDOW,
        default_limit=settings.TRENDING_DEFAULT_LIMIT,
        max_limit=settings.TRENDING_MAX_LIMIT
    )

@router.get("/api/activity/friends", response_model=TrendingResponse)
async def get_friends_trending(
    limit: Optional[int] = Depends(get_limit),
    service: TrendingService = Depends(get_trending_service)
):
    """
    De-duplicated friends' trending feed (one entry per user+movie, newest-first)
    """
    return await service.get_trending(limit)
