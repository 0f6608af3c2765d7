from typing import Optional
import httpx
import redis.asyncio as redis
from fastapi import Depends, Request

from .config import settings
from .exceptions import ActivityValidationError
from .repositories.activity_repository import ActivityRepository
from .services.movie_catalog import MovieCatalog

# Global state for connections
class AppState:
    redis_client: redis.Redis = None
    http_client: httpx.AsyncClient = None

state = AppState()

async def init_resources():
    """Initialize all resources"""
    state.redis_client = redis.from_url(
        settings.REDIS_URL,
        encoding="utf-8",
        decode_responses=True,
        socket_timeout=settings.REDIS_SOCKET_TIMEOUT,
        socket_connect_timeout=settings.REDIS_SOCKET_TIMEOUT
    )
    state.http_client = httpx.AsyncClient(timeout=settings.TMDB_TIMEOUT_SEC)

async def close_resources():
    """Close all resources"""
    if state.redis_client:
        await state.redis_client.aclose()
    if state.http_client:
        await state.http_client.aclose()

# Dependencies
async def get_redis() -> redis.Redis:
    return state.redis_client

async def get_http_client() -> httpx.AsyncClient:
    return state.http_client

async def get_activity_repository(redis_client = Depends(get_redis)) -> ActivityRepository:
    return ActivityRepository(redis_client, settings.ACTIVITY_LIST_KEY)

async def get_movie_catalog(http_client = Depends(get_http_client)) -> MovieCatalog:
    return MovieCatalog(
        http_client,
        api_key=settings.TMDB_API_KEY,
        base_url=settings.TMDB_BASE_URL,
        timeout=settings.TMDB_TIMEOUT_SEC
    )

# Query parameters
async def get_limit(limit: Optional[str] = None) -> Optional[int]:
    """
    `?limit=` as an int. Missing or blank means "use the default";
    anything that is not a whole number is rejected.
    """
    if limit is None or not limit.strip():
        return None
    try:
        return int(limit.strip())
    except ValueError:
        raise ActivityValidationError("Invalid limit")

# Session identity
async def get_current_actor(request: Request) -> Optional[str]:
    """
    Username from the session cookie, lowercased, or None when signed out.
    The cookie is issued by the login flow; here it is only read.
    """
    username = (request.cookies.get(settings.SESSION_COOKIE_NAME) or "").strip().lower()
    return username or None
