
import json
import pytest
from unittest.mock import AsyncMock, patch
from cinecircle.exceptions import ActivityValidationError, AuthenticationError, StoreUnavailableError
from cinecircle.repositories.activity_repository import ActivityRepository
from cinecircle.services.activity_service import ActivityService

@pytest.fixture
def mock_activity_repo():
    repo = AsyncMock(spec=ActivityRepository)
    repo.list_key = "activity:events"
    return repo

@pytest.mark.asyncio
async def test_record_activity_success(mock_activity_repo, mock_catalog):
    # Arrange
    service = ActivityService(mock_activity_repo, mock_catalog, max_events=2000)

    # Act
    with patch("cinecircle.services.activity_service.now_ms", return_value=1_700_000_000_000):
        event = await service.record_activity({"type": "rated", "movieId": 27205}, "Alice")

    # Assert
    assert event.username == "alice"
    assert event.movie_id == 27205
    assert event.type == "rated"
    assert event.at == 1_700_000_000_000
    assert event.title == "Inception"
    mock_catalog.get_movie_summary.assert_called_once_with(27205)

    mock_activity_repo.prepend.assert_called_once()
    stored = json.loads(mock_activity_repo.prepend.call_args.args[0])
    assert stored == {
        "at": 1_700_000_000_000,
        "type": "rated",
        "movieId": 27205,
        "username": "alice",
        "title": "Inception",
        "posterPath": "/inception.jpg",
        "releaseDate": "2010-07-15",
    }
    mock_activity_repo.truncate.assert_called_once_with(2000)

@pytest.mark.asyncio
async def test_record_activity_accepts_numeric_string_id(mock_activity_repo, mock_catalog):
    service = ActivityService(mock_activity_repo, mock_catalog)

    event = await service.record_activity({"type": "top5_added", "movieId": "603"}, "alice")

    assert event.movie_id == 603

@pytest.mark.asyncio
@pytest.mark.parametrize("body", [
    {"type": "rated", "movieId": -1},
    {"type": "rated", "movieId": 0},
    {"type": "rated", "movieId": 2.5},
    {"type": "rated", "movieId": "abc"},
    {"type": "rated"},
    {"type": "liked", "movieId": 1},
    {"movieId": 1},
    {},
    None,
])
async def test_record_activity_rejects_invalid_payload(mock_activity_repo, mock_catalog, body):
    service = ActivityService(mock_activity_repo, mock_catalog)

    with pytest.raises(ActivityValidationError):
        await service.record_activity(body, "alice")

    mock_catalog.get_movie_summary.assert_not_called()
    mock_activity_repo.prepend.assert_not_called()
    mock_activity_repo.truncate.assert_not_called()

@pytest.mark.asyncio
@pytest.mark.parametrize("actor", [None, "", "   "])
async def test_record_activity_requires_actor(mock_activity_repo, mock_catalog, actor):
    service = ActivityService(mock_activity_repo, mock_catalog)

    with pytest.raises(AuthenticationError):
        await service.record_activity({"type": "rated", "movieId": 1}, actor)

    mock_activity_repo.prepend.assert_not_called()

@pytest.mark.asyncio
async def test_record_activity_without_catalog_metadata(mock_activity_repo, mock_catalog):
    # Catalog unreachable -> still written, with null metadata
    mock_catalog.get_movie_summary.return_value = None
    service = ActivityService(mock_activity_repo, mock_catalog)

    event = await service.record_activity({"type": "watchlist_added", "movieId": 5}, "bob")

    assert event.title is None
    assert event.poster_path is None
    assert event.release_date is None
    mock_activity_repo.prepend.assert_called_once()

@pytest.mark.asyncio
async def test_record_activity_tolerates_trim_failure(mock_activity_repo, mock_catalog):
    mock_activity_repo.truncate.side_effect = StoreUnavailableError("trim failed")
    service = ActivityService(mock_activity_repo, mock_catalog)

    event = await service.record_activity({"type": "rated", "movieId": 1}, "alice")

    assert event.movie_id == 1
    mock_activity_repo.prepend.assert_called_once()

@pytest.mark.asyncio
async def test_record_activity_surfaces_write_failure(mock_activity_repo, mock_catalog):
    mock_activity_repo.prepend.side_effect = StoreUnavailableError("down")
    service = ActivityService(mock_activity_repo, mock_catalog)

    with pytest.raises(StoreUnavailableError):
        await service.record_activity({"type": "rated", "movieId": 1}, "alice")

    mock_activity_repo.truncate.assert_not_called()

@pytest.mark.asyncio
async def test_list_never_exceeds_retention(mock_redis, redis_list, mock_catalog):
    # Arrange
    repo = ActivityRepository(mock_redis, "activity:events")
    service = ActivityService(repo, mock_catalog, max_events=25)

    # Act
    for movie_id in range(1, 61):
        await service.record_activity({"type": "rated", "movieId": movie_id}, "alice")
        assert len(redis_list) <= 25

    # Assert: the newest records are the ones kept
    assert len(redis_list) == 25
    assert json.loads(redis_list[0])["movieId"] == 60
    assert json.loads(redis_list[-1])["movieId"] == 36

@pytest.mark.asyncio
async def test_get_recent_skips_unparseable(mock_activity_repo, mock_catalog, make_record):
    mock_activity_repo.read_range.return_value = [
        make_record(at=3, type="watchlist_removed", movieId=1),
        "garbage",
        make_record(at=2, movieId="12"),
        json.dumps({"at": 1, "type": "rated", "movieId": 9, "title": "No user"}),
    ]
    service = ActivityService(mock_activity_repo, mock_catalog)

    events = await service.get_recent(10)

    mock_activity_repo.read_range.assert_called_once_with(0, 9)
    assert [e.movie_id for e in events] == [1, 9]
    assert events[0].type == "watchlist_removed"
    assert events[1].username == ""

@pytest.mark.asyncio
async def test_get_stats_reports_bad_records(mock_activity_repo, mock_catalog, make_record):
    mock_activity_repo.length.return_value = 2
    mock_activity_repo.read_range.return_value = [make_record(movieId=7), "oops"]
    service = ActivityService(mock_activity_repo, mock_catalog)

    stats = await service.get_stats()

    mock_activity_repo.read_range.assert_called_once_with(0, 1)
    assert stats["listKey"] == "activity:events"
    assert stats["len"] == 2
    assert stats["sampleCount"] == 2
    assert stats["items"][0]["ok"] is True
    assert stats["items"][0]["movieId"] == 7
    assert stats["items"][1] == {"i": 1, "ok": False, "raw": "oops"}

@pytest.mark.asyncio
async def test_get_stats_empty_list(mock_activity_repo, mock_catalog):
    mock_activity_repo.length.return_value = 0
    service = ActivityService(mock_activity_repo, mock_catalog)

    stats = await service.get_stats()

    mock_activity_repo.read_range.assert_not_called()
    assert stats["sampleCount"] == 0
    assert stats["items"] == []

@pytest.mark.asyncio
async def test_force_activity_uses_session_user(mock_activity_repo, mock_catalog):
    service = ActivityService(mock_activity_repo, mock_catalog, max_events=2000)

    event = await service.force_activity("rated", "27205", "Alice")

    assert event.username == "alice"
    assert event.movie_id == 27205
    mock_activity_repo.prepend.assert_called_once()
    mock_activity_repo.truncate.assert_called_once_with(2000)

@pytest.mark.asyncio
async def test_force_activity_defaults_to_anon(mock_activity_repo, mock_catalog):
    service = ActivityService(mock_activity_repo, mock_catalog)

    event = await service.force_activity("watchlist_added", "7", None)

    assert event.username == "anon"

@pytest.mark.asyncio
@pytest.mark.parametrize("event_type, movie_id", [
    ("top5_removed", "7"),
    ("rated", "0"),
    ("rated", ""),
    ("rated", None),
    (None, "7"),
])
async def test_force_activity_rejects_bad_params(mock_activity_repo, mock_catalog, event_type, movie_id):
    service = ActivityService(mock_activity_repo, mock_catalog)

    with pytest.raises(ActivityValidationError):
        await service.force_activity(event_type, movie_id, "alice")

    mock_activity_repo.prepend.assert_not_called()
