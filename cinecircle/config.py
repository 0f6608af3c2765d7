from typing import List, Optional
from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    REDIS_URL: str = "redis://redis:6379"
    REDIS_SOCKET_TIMEOUT: float = 5.0

    # Movie catalog (TMDb). Enrichment is skipped when no key is set.
    TMDB_API_KEY: Optional[str] = None
    TMDB_BASE_URL: str = "https://api.themoviedb.org/3"
    TMDB_TIMEOUT_SEC: float = 5.0

    # Activity list retention / trending window
    ACTIVITY_LIST_KEY: str = "activity:events"
    ACTIVITY_MAX_EVENTS: int = 2000
    TRENDING_SCAN_WINDOW: int = 1000
    TRENDING_DEFAULT_LIMIT: int = 50
    TRENDING_MAX_LIMIT: int = 200

    SESSION_COOKIE_NAME: str = "cc_user"
    CORS_ORIGINS: List[str] = ["http://localhost:3000", "http://127.0.0.1:3000"]

    RATE_LIMIT_DEFAULT: str = "100/minute"
    RATE_LIMIT_INGEST: str = "60/minute"

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

settings = Settings()
