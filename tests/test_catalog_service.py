"""
Tests for Catalog Service
"""

import pytest
from unittest.mock import AsyncMock

from conftest import tmdb_movie, tmdb_show
from app.core.exceptions import UpstreamError
from app.models.media import MediaType
from app.models.user_lists import WatchlistEntry
from app.services.catalog_service import CatalogService
from app.services.trailer_service import TrailerEnricher


@pytest.fixture
def catalog(mock_tmdb, mock_resolver):
    return CatalogService(mock_tmdb, TrailerEnricher(mock_tmdb), mock_resolver)


@pytest.mark.asyncio
async def test_trending_picks_caps_and_tags(catalog, mock_tmdb):
    mock_tmdb.trending.return_value = {"results": [tmdb_show(i, media_type="tv") for i in range(10)]}

    items = await catalog.trending_picks(MediaType.TV, limit=6)

    assert len(items) == 6
    assert {item.media_type for item in items} == {"tv"}
    mock_tmdb.discover.assert_not_awaited()


@pytest.mark.asyncio
async def test_trending_picks_by_original_language_uses_discover(catalog, mock_tmdb):
    mock_tmdb.discover.return_value = {"results": [tmdb_movie(1)]}

    await catalog.trending_picks(MediaType.MOVIE, original_language="hi")

    mock_tmdb.trending.assert_not_awaited()
    media_type, params = mock_tmdb.discover.await_args.args
    assert media_type == MediaType.MOVIE
    assert params["with_original_language"] == "hi"
    assert params["sort_by"] == "popularity.desc"


@pytest.mark.asyncio
async def test_trending_batch_survives_one_trailer_failure(catalog, mock_tmdb):
    mock_tmdb.trending.return_value = {"results": [tmdb_movie(i) for i in range(10)]}

    async def videos(media_type, tmdb_id):
        if tmdb_id == 4:
            raise UpstreamError(500)
        return [{"type": "Trailer", "site": "YouTube", "key": f"k{tmdb_id}"}]

    mock_tmdb.videos = AsyncMock(side_effect=videos)

    items = await catalog.trending_picks(MediaType.MOVIE, limit=10)

    assert len(items) == 10
    assert items[4].trailer_url is None
    assert all(item.trailer_url for i, item in enumerate(items) if i != 4)


@pytest.mark.asyncio
async def test_details_attaches_trailer_key(catalog, mock_tmdb):
    mock_tmdb.details.return_value = {"id": 42, "title": "Arrival"}
    mock_tmdb.videos.return_value = [{"type": "Trailer", "site": "YouTube", "key": "tFMo3UJ4B4g"}]

    data = await catalog.details(MediaType.MOVIE, 42)

    assert data == {"id": 42, "title": "Arrival", "trailerKey": "tFMo3UJ4B4g"}


@pytest.mark.asyncio
async def test_details_videos_failure_nulls_trailer_key(catalog, mock_tmdb):
    mock_tmdb.details.return_value = {"id": 42}
    mock_tmdb.videos = AsyncMock(side_effect=UpstreamError(404))

    data = await catalog.details(MediaType.MOVIE, 42)

    assert data["trailerKey"] is None


@pytest.mark.asyncio
async def test_details_failure_propagates(catalog, mock_tmdb):
    mock_tmdb.details = AsyncMock(side_effect=UpstreamError(404, "The resource you requested could not be found."))

    with pytest.raises(UpstreamError) as exc_info:
        await catalog.details(MediaType.TV, 1)

    assert exc_info.value.status_code == 404


@pytest.mark.asyncio
async def test_genres_lists_both_media_types(catalog):
    data = await catalog.genres("en-US")

    assert data["language"] == "en-US"
    assert {"id": 28, "name": "Action"} in data["movie"]
    assert {"id": 10765, "name": "Sci-Fi & Fantasy"} in data["tv"]


@pytest.mark.asyncio
async def test_hydrate_watchlist_tolerates_partial_failure(catalog, mock_tmdb):
    async def details(media_type, tmdb_id):
        if tmdb_id == 2:
            raise UpstreamError(404)
        return {"id": tmdb_id, "overview": f"About {tmdb_id}", "poster_path": f"/p{tmdb_id}.jpg", "vote_average": 6.5}

    mock_tmdb.details = AsyncMock(side_effect=details)
    entries = [
        WatchlistEntry(movieId=1, title="One", genreIds=[28]),
        WatchlistEntry(movieId=2, title="Two", genreIds=[35], posterPath="/stored.jpg"),
    ]

    hydrated = await catalog.hydrate_watchlist(entries)

    assert hydrated[0]["overview"] == "About 1"
    assert hydrated[0]["posterPath"] == "/p1.jpg"
    assert hydrated[1]["movieId"] == 2
    assert hydrated[1]["overview"] is None
    assert hydrated[1]["posterPath"] == "/stored.jpg"
