"""
Pytest Fixtures

Shared mocks and fixtures for testing.
"""

import os

# Settings are cached on first import; configure before importing app code
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("TMDB_API_KEY", "test-tmdb-key")
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")
os.environ.setdefault("REDIS_URL", "")

import pytest
from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock, MagicMock
from typing import Any, Dict, List

from app.services.genre_service import build_genre_entry


MOVIE_GENRES = [
    {"id": 28, "name": "Action"},
    {"id": 12, "name": "Adventure"},
    {"id": 35, "name": "Comedy"},
    {"id": 18, "name": "Drama"},
    {"id": 27, "name": "Horror"},
    {"id": 10749, "name": "Romance"},
    {"id": 878, "name": "Science Fiction"},
    {"id": 53, "name": "Thriller"},
]

TV_GENRES = [
    {"id": 10759, "name": "Action & Adventure"},
    {"id": 35, "name": "Comedy"},
    {"id": 18, "name": "Drama"},
    {"id": 10765, "name": "Sci-Fi & Fantasy"},
    {"id": 10768, "name": "War & Politics"},
]


class FakeClock:
    """Manually advanced UTC clock."""

    def __init__(self, start: datetime = datetime(2025, 1, 1, tzinfo=timezone.utc)):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs):
        self.now += timedelta(**kwargs)


@pytest.fixture
def movie_genre_payload() -> List[Dict[str, Any]]:
    return [dict(g) for g in MOVIE_GENRES]


@pytest.fixture
def tv_genre_payload() -> List[Dict[str, Any]]:
    return [dict(g) for g in TV_GENRES]


@pytest.fixture
def genre_entry(movie_genre_payload, tv_genre_payload):
    """Genre tables as the resolver would build them."""
    return build_genre_entry(
        "en-US",
        movie_genre_payload,
        tv_genre_payload,
        datetime(2030, 1, 1, tzinfo=timezone.utc),
    )


@pytest.fixture
def fake_clock():
    return FakeClock()


@pytest.fixture
def mock_tmdb(movie_genre_payload, tv_genre_payload):
    """TMDbClient double with every endpoint as an AsyncMock."""
    mock = MagicMock()

    async def genre_list(media_type, language=None):
        return movie_genre_payload if media_type.value == "movie" else tv_genre_payload

    mock.genre_list = AsyncMock(side_effect=genre_list)
    mock.search_multi = AsyncMock(return_value={"results": [], "total_results": 0, "total_pages": 0, "page": 1})
    mock.search = AsyncMock(return_value={"results": [], "total_results": 0, "total_pages": 0})
    mock.discover = AsyncMock(return_value={"results": [], "total_results": 0, "total_pages": 0})
    mock.trending = AsyncMock(return_value={"results": []})
    mock.movie_list = AsyncMock(return_value={"results": []})
    mock.details = AsyncMock(return_value={})
    mock.videos = AsyncMock(return_value=[])
    return mock


@pytest.fixture
def mock_resolver(genre_entry):
    """GenreResolver double returning the fixture tables."""
    mock = MagicMock()
    mock.resolve = AsyncMock(return_value=genre_entry)
    return mock


def tmdb_movie(tmdb_id: int, release_date: str = "2024-01-01", **extra) -> Dict[str, Any]:
    item = {
        "id": tmdb_id,
        "title": f"Movie {tmdb_id}",
        "overview": "",
        "poster_path": f"/poster{tmdb_id}.jpg",
        "backdrop_path": None,
        "vote_average": 7.0,
        "release_date": release_date,
        "genre_ids": [28],
    }
    item.update(extra)
    return item


def tmdb_show(tmdb_id: int, first_air_date: str = "2024-01-01", **extra) -> Dict[str, Any]:
    item = {
        "id": tmdb_id,
        "name": f"Show {tmdb_id}",
        "overview": "",
        "poster_path": None,
        "backdrop_path": None,
        "vote_average": 8.0,
        "first_air_date": first_air_date,
        "genre_ids": [18],
    }
    item.update(extra)
    return item
