"""
TMDb movie catalog lookup.
- Async httpx client, shared across requests (created at startup).
- Best-effort: every failure is logged and reported as None, never raised.
- No retries and no caching; one request per lookup.
"""
import logging
from typing import Optional
import httpx

from ..schemas.movie import MovieSummary

logger = logging.getLogger(__name__)

class MovieCatalog:
    def __init__(
        self,
        http_client: httpx.AsyncClient,
        api_key: Optional[str],
        base_url: str = "https://api.themoviedb.org/3",
        timeout: float = 5.0
    ):
        self.http_client = http_client
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    async def get_movie_summary(self, movie_id: int) -> Optional[MovieSummary]:
        if not self.api_key:
            logger.debug("TMDB API key not configured, skipping enrichment")
            return None

        url = f"{self.base_url}/movie/{movie_id}"
        params = {"api_key": self.api_key, "language": "en-US"}

        try:
            resp = await self.http_client.get(url, params=params, timeout=self.timeout)
            resp.raise_for_status()
            data = resp.json()
        except httpx.HTTPStatusError as e:
            logger.warning(
                f"TMDB returned {e.response.status_code} for movie {movie_id}",
                extra={"movie_id": movie_id}
            )
            return None
        except (httpx.HTTPError, ValueError) as e:
            logger.warning(f"TMDB lookup failed for movie {movie_id}: {e}", extra={"movie_id": movie_id})
            return None

        if not isinstance(data, dict):
            return None

        return MovieSummary(
            title=data.get("title") or None,
            poster_path=data.get("poster_path") or None,
            release_date=data.get("release_date") or None,
        )
