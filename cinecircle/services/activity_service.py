import logging
import time
from typing import Any, Dict, List, Optional
from pydantic import ValidationError

from ..exceptions import ActivityValidationError, AuthenticationError, StoreUnavailableError
from ..repositories.activity_repository import ActivityRepository
from ..schemas.activity import TRENDING_TYPES, ActivityEvent, ActivityPayload
from .movie_catalog import MovieCatalog
from .trending_service import clamp_limit, parse_record

logger = logging.getLogger(__name__)

STATS_SAMPLE_SIZE = 21
HEALTH_PROBE_KEY = "cc:health:probe"
ANONYMOUS_ACTOR = "anon"

def now_ms() -> int:
    return int(time.time() * 1000)

class ActivityService:
    def __init__(
        self,
        activity_repo: ActivityRepository,
        catalog: MovieCatalog,
        max_events: int = 2000,
        default_limit: int = 50,
        max_limit: int = 200
    ):
        self.activity_repo = activity_repo
        self.catalog = catalog
        self.max_events = max_events
        self.default_limit = default_limit
        self.max_limit = max_limit

    async def record_activity(self, body: Optional[Dict[str, Any]], actor: Optional[str]) -> ActivityEvent:
        """
        Validate an action report and append it to the activity list.

        Flow:
        1. Validate payload (400, nothing written)
        2. Require an actor from the session (401, nothing written)
        3. Enrich with catalog metadata (best effort)
        4. Prepend the record, then trim the list to max_events
        """
        try:
            payload = ActivityPayload.model_validate(body or {})
        except ValidationError as e:
            logger.info("Rejected activity payload", extra={"error": str(e)})
            raise ActivityValidationError() from e

        username = (actor or "").strip().lower()
        if not username:
            raise AuthenticationError()

        return await self._append(payload, username)

    async def force_activity(
        self,
        event_type: Optional[str],
        movie_id: Optional[str],
        actor: Optional[str]
    ) -> ActivityEvent:
        """
        Manual seeding from query parameters. Only trending types are
        accepted; a signed-out caller is recorded as "anon".
        """
        event_type = (event_type or "").strip()
        if event_type not in TRENDING_TYPES:
            raise ActivityValidationError("Bad params")
        try:
            payload = ActivityPayload.model_validate({"type": event_type, "movieId": (movie_id or "").strip()})
        except ValidationError as e:
            raise ActivityValidationError("Bad params") from e

        username = (actor or "").strip().lower() or ANONYMOUS_ACTOR
        return await self._append(payload, username)

    async def _append(self, payload: ActivityPayload, username: str) -> ActivityEvent:
        meta = await self.catalog.get_movie_summary(payload.movie_id)

        event = ActivityEvent(
            at=now_ms(),
            type=payload.type.value,
            movie_id=payload.movie_id,
            username=username,
            title=meta.title if meta else None,
            poster_path=meta.poster_path if meta else None,
            release_date=meta.release_date if meta else None,
        )

        await self.activity_repo.prepend(event.to_record())

        # Retention is best effort; the event is already stored
        try:
            await self.activity_repo.truncate(self.max_events)
        except StoreUnavailableError as e:
            logger.warning(f"Activity trim failed: {e}", extra={"username": username})

        logger.info(
            "Activity recorded",
            extra={"username": username, "movie_id": payload.movie_id, "event_type": event.type}
        )
        return event

    async def get_recent(self, limit: Optional[int] = None) -> List[ActivityEvent]:
        """Newest raw events, no type filter and no dedup."""
        limit = clamp_limit(limit, self.default_limit, self.max_limit)
        raw_list = await self.activity_repo.read_range(0, limit - 1)

        events = []
        for raw in raw_list:
            record = parse_record(raw)
            if not record:
                continue
            if not _is_number(record.get("movieId")) or not _is_number(record.get("at")):
                continue
            try:
                events.append(ActivityEvent.model_validate({**record, "username": record.get("username") or ""}))
            except ValidationError:
                continue
        return events

    async def get_stats(self) -> Dict[str, Any]:
        """Length of the list plus a sample of its head, flagging records that fail to parse."""
        length = await self.activity_repo.length()
        raw_list = []
        if length > 0:
            raw_list = await self.activity_repo.read_range(0, min(STATS_SAMPLE_SIZE, length) - 1)

        items = []
        for i, raw in enumerate(raw_list):
            record = parse_record(raw)
            if record is None:
                items.append({"i": i, "ok": False, "raw": str(raw)})
            else:
                items.append({"i": i, "ok": True, **record})

        return {
            "listKey": self.activity_repo.list_key,
            "len": length,
            "sampleCount": len(items),
            "items": items,
        }

    async def check_store(self) -> Dict[str, Any]:
        stamp = str(now_ms())
        read_back = await self.activity_repo.probe(HEALTH_PROBE_KEY, stamp)
        return {"ok": read_back == stamp, "wrote": stamp, "read": read_back}

def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)
