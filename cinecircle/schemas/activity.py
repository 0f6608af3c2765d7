from enum import Enum
from typing import Any, Dict, List, Optional
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

class ActivityType(str, Enum):
    RATED = "rated"
    WATCHLIST_ADDED = "watchlist_added"
    WATCHLIST_REMOVED = "watchlist_removed"
    TOP5_ADDED = "top5_added"
    TOP5_REMOVED = "top5_removed"

# Removal events are stored but never shown as trending
TRENDING_TYPES = frozenset({
    ActivityType.RATED.value,
    ActivityType.WATCHLIST_ADDED.value,
    ActivityType.TOP5_ADDED.value,
})

class ActivityPayload(BaseModel):
    """Action reported by the client. The actor comes from the session, not from here."""
    type: ActivityType
    movie_id: int = Field(..., gt=0, alias="movieId")

    model_config = ConfigDict(populate_by_name=True)

class ActivityEvent(BaseModel):
    """One stored activity record (also the shape of a trending entry)"""
    at: int
    type: str
    movie_id: int = Field(..., gt=0, alias="movieId")
    username: str
    title: Optional[str] = None
    poster_path: Optional[str] = Field(
        None, alias="posterPath", validation_alias=AliasChoices("posterPath", "poster_path")
    )
    release_date: Optional[str] = Field(
        None, alias="releaseDate", validation_alias=AliasChoices("releaseDate", "release_date")
    )

    model_config = ConfigDict(populate_by_name=True)

    @field_validator("title", "poster_path", "release_date", mode="before")
    @classmethod
    def _display_text(cls, value: Any) -> Optional[str]:
        # Display-only fields: keep numbers as text, drop anything else
        if value is None or isinstance(value, str):
            return value
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return None

    def to_record(self) -> str:
        return self.model_dump_json(by_alias=True)

class TrendingEntry(ActivityEvent):
    pass

class IngestResponse(BaseModel):
    ok: bool = True
    event: ActivityEvent

class TrendingResponse(BaseModel):
    items: List[TrendingEntry]
    total: int

class RecentResponse(BaseModel):
    events: List[ActivityEvent]

class ActivityStatsResponse(BaseModel):
    list_key: str = Field(..., alias="listKey")
    length: int = Field(..., alias="len")
    sample_count: int = Field(..., alias="sampleCount")
    items: List[Dict[str, Any]]

    model_config = ConfigDict(populate_by_name=True)
