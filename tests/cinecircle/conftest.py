
import json
import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from unittest.mock import AsyncMock
from cinecircle.main import app
from cinecircle.dependencies import get_redis, get_movie_catalog
from cinecircle.schemas.movie import MovieSummary
from cinecircle.services.movie_catalog import MovieCatalog

def _make_record(**fields) -> str:
    record = {
        "at": 1_700_000_000_000,
        "type": "rated",
        "movieId": 27205,
        "username": "alice",
        "title": None,
        "posterPath": None,
        "releaseDate": None,
    }
    record.update(fields)
    return json.dumps(record)

@pytest.fixture
def make_record():
    """Builds serialized activity records as the store holds them"""
    return _make_record

@pytest.fixture
def redis_list():
    """Backing list for mock_redis, index 0 = newest"""
    return []

@pytest.fixture
def mock_redis(redis_list):
    """AsyncMock Redis client whose list commands act on redis_list"""
    mock = AsyncMock()

    async def lpush(key, *values):
        for value in values:
            redis_list.insert(0, value)
        return len(redis_list)

    async def ltrim(key, start, end):
        kept = redis_list[start:end + 1] if end >= 0 else redis_list[start:]
        redis_list[:] = kept
        return True

    async def lrange(key, start, end):
        return list(redis_list[start:end + 1] if end >= 0 else redis_list[start:])

    async def llen(key):
        return len(redis_list)

    mock.lpush.side_effect = lpush
    mock.ltrim.side_effect = ltrim
    mock.lrange.side_effect = lrange
    mock.llen.side_effect = llen
    return mock

@pytest.fixture
def mock_catalog():
    catalog = AsyncMock(spec=MovieCatalog)
    catalog.get_movie_summary.return_value = MovieSummary(
        title="Inception",
        poster_path="/inception.jpg",
        release_date="2010-07-15"
    )
    return catalog

@pytest_asyncio.fixture
async def client(mock_redis, mock_catalog):
    # Override dependencies
    app.dependency_overrides[get_redis] = lambda: mock_redis
    app.dependency_overrides[get_movie_catalog] = lambda: mock_catalog

    transport = ASGITransport(app=app)
    from cinecircle.limiter import limiter
    limiter.enabled = False
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    limiter.enabled = True

    app.dependency_overrides = {}
