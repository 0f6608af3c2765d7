from fastapi import APIRouter, Body, Depends, Query, Request
from typing import Any, Dict, Optional

from ..config import settings
from ..schemas.activity import ActivityStatsResponse, IngestResponse, RecentResponse
from ..dependencies import get_activity_repository, get_current_actor, get_limit, get_movie_catalog
from ..services.activity_service import ActivityService
from ..limiter import limiter

router = APIRouter()

async def get_activity_service(
    activity_repo = Depends(get_activity_repository),
    catalog = Depends(get_movie_catalog)
) -> ActivityService:
    return ActivityService(
        activity_repo,
        catalog,
        max_events=settings.ACTIVITY_MAX_EVENTS,
        default_limit=settings.TRENDING_DEFAULT_LIMIT,
        max_limit=settings.TRENDING_MAX_LIMIT
    )

@router.post("/api/activity/post", response_model=IngestResponse)
@limiter.limit(settings.RATE_LIMIT_INGEST)
async def post_activity(
    request: Request, # Required for limiter
    body: Optional[Dict[str, Any]] = Body(None),
    actor: Optional[str] = Depends(get_current_actor),
    service: ActivityService = Depends(get_activity_service)
):
    """
    Record a rating / watchlist / top-5 action for the signed-in user
    """
    event = await service.record_activity(body, actor)
    return IngestResponse(ok=True, event=event)

@router.get("/api/activity/force", response_model=IngestResponse)
@limiter.limit(settings.RATE_LIMIT_INGEST)
async def force_activity(
    request: Request, # Required for limiter
    event_type: Optional[str] = Query(None, alias="type"),
    movie_id: Optional[str] = Query(None, alias="movieId"),
    actor: Optional[str] = Depends(get_current_actor),
    service: ActivityService = Depends(get_activity_service)
):
    """
    Write one well-formed event from query parameters, e.g.
    /api/activity/force?movieId=27205&type=rated
    """
    event = await service.force_activity(event_type, movie_id, actor)
    return IngestResponse(ok=True, event=event)

@router.get("/api/activity/recent", response_model=RecentResponse)
async def get_recent_activity(
    limit: Optional[int] = Depends(get_limit),
    service: ActivityService = Depends(get_activity_service)
):
    """
    Newest raw activity events, without de-duplication
    """
    return RecentResponse(events=await service.get_recent(limit))

@router.get("/api/activity/stats", response_model=ActivityStatsResponse)
async def get_activity_stats(
    service: ActivityService = Depends(get_activity_service)
):
    """List length and a parsed sample of the newest records"""
    return await service.get_stats()

@router.get("/api/redis/health")
async def redis_health(
    service: ActivityService = Depends(get_activity_service)
):
    """Write, read back and delete a probe key"""
    return await service.check_store()
