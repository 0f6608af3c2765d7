"""
=============================================================================
CineCircle Activity API
=============================================================================
Features:
  - Activity ingestion (ratings, watchlist, top-5) into a bounded Redis list
  - Friends' trending feed, de-duplicated per user+movie, newest-first
  - Best-effort TMDb enrichment of activity records
  - JSON logging with per-request correlation IDs
=============================================================================
"""

import logging
from datetime import datetime

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from .config import settings
from .dependencies import init_resources, close_resources
from .exceptions import (
    CineCircleException,
    app_exception_handler,
    global_exception_handler,
    http_exception_handler,
    validation_exception_handler,
)
from .limiter import limiter
from .logging_config import setup_logging
from .middleware import RequestTrackingMiddleware
from .routers import activity_router, trending_router

API_VERSION = "1.0.0"

setup_logging()
logger = logging.getLogger(__name__)

app = FastAPI(
    title="CineCircle Activity API",
    description="Activity ingestion and friends' trending feed",
    version=API_VERSION
)

# =============================================================================
# MIDDLEWARE & ERROR HANDLING
# =============================================================================
app.state.limiter = limiter
app.add_middleware(SlowAPIMiddleware)
app.add_middleware(RequestTrackingMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
app.add_exception_handler(CineCircleException, app_exception_handler)
app.add_exception_handler(StarletteHTTPException, http_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(Exception, global_exception_handler)

app.include_router(activity_router.router)
app.include_router(trending_router.router)


# =============================================================================
# STARTUP & SHUTDOWN
# =============================================================================
@app.on_event("startup")
async def startup():
    """Initialize connections on startup"""
    await init_resources()
    logger.info("All connections initialized")


@app.on_event("shutdown")
async def shutdown():
    """Cleanup connections on shutdown"""
    await close_resources()
    logger.info("All connections closed")


@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {
        "status": "healthy",
        "timestamp": datetime.now().isoformat(),
        "version": API_VERSION
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
