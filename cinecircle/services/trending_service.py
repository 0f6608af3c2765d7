import json
import logging
from typing import Any, Dict, Iterable, List, Optional
from pydantic import ValidationError

from ..repositories.activity_repository import ActivityRepository
from ..schemas.activity import TRENDING_TYPES, TrendingEntry

logger = logging.getLogger(__name__)

def clamp_limit(limit: Optional[int], default: int = 50, maximum: int = 200) -> int:
    if limit is None:
        return default
    return max(1, min(maximum, int(limit)))

def parse_record(raw: Any) -> Optional[Dict[str, Any]]:
    """Decode one stored record. Returns None for anything that isn't a JSON object."""
    if isinstance(raw, dict):
        return raw
    if isinstance(raw, bytes):
        try:
            raw = raw.decode("utf-8")
        except UnicodeDecodeError:
            return None
    if not isinstance(raw, str):
        return None
    try:
        record = json.loads(raw)
    except ValueError:
        return None
    return record if isinstance(record, dict) else None

def project_trending(raw_records: Iterable[Any], limit: int) -> List[TrendingEntry]:
    """
    Reduce a newest-first window of raw records into the trending feed.

    Keeps only trending-worthy types, one entry per (username, movieId).
    Because the window is newest-first, the first record seen for a pair
    is the one kept and older ones are dropped.
    """
    seen = set()
    items: List[TrendingEntry] = []

    for raw in raw_records:
        record = parse_record(raw)
        if record is None:
            logger.debug("Skipping unparseable activity record")
            continue

        event_type = record.get("type")
        if not isinstance(event_type, str) or event_type not in TRENDING_TYPES:
            continue
        if not record.get("movieId") or not record.get("at"):
            continue

        username = str(record.get("username") or "").lower()
        if not username:
            continue

        try:
            entry = TrendingEntry.model_validate({**record, "username": username})
        except ValidationError:
            logger.debug("Skipping malformed activity record")
            continue

        key = f"{username}:{entry.movie_id}"
        if key in seen:
            continue
        seen.add(key)
        items.append(entry)

        if len(items) >= limit:
            break

    return items

class TrendingService:
    def __init__(
        self,
        activity_repo: ActivityRepository,
        scan_window: int = 1000,
        default_limit: int = 50,
        max_limit: int = 200
    ):
        self.activity_repo = activity_repo
        self.scan_window = scan_window
        self.default_limit = default_limit
        self.max_limit = max_limit

    async def get_trending(self, limit: Optional[int] = None) -> Dict[str, Any]:
        """
        Friends' trending feed: newest-first, one entry per user+movie.

        The window is read once, so writes landing after the read are
        simply not part of this response.
        """
        limit = clamp_limit(limit, self.default_limit, self.max_limit)
        window = await self.activity_repo.read_range(0, self.scan_window - 1)
        items = project_trending(window, limit)

        logger.debug(
            f"Projected {len(items)} trending entries from {len(window)} records",
            extra={"limit": limit}
        )
        return {"items": items, "total": len(items)}
