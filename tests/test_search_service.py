"""
Tests for Search Service
"""

import pytest
from unittest.mock import AsyncMock

from conftest import tmdb_movie, tmdb_show
from app.core.exceptions import BadRequestError, UpstreamError
from app.models.media import MediaType
from app.services.search_service import (
    SearchAggregator,
    parse_genre_tokens,
    parse_search_genres,
    split_genre_param,
)


# =============================================================================
# PARAMETER PARSING
# =============================================================================

def test_split_genre_param_trims_and_drops_empties():
    assert split_genre_param(" 28, ,35 ,") == ["28", "35"]
    assert split_genre_param(None) == []
    assert split_genre_param("") == []


def test_numeric_tokens_must_be_known(genre_entry):
    ids, romance = parse_genre_tokens(["28", "99999", "35"], MediaType.MOVIE, genre_entry)
    assert ids == [28, 35]
    assert romance is False


def test_duplicate_tokens_are_deduplicated(genre_entry):
    ids, _ = parse_genre_tokens(["28", "action", "28"], MediaType.MOVIE, genre_entry)
    assert ids == [28]


def test_names_are_normalized(genre_entry):
    ids, _ = parse_genre_tokens(["Sci-Fi & Fantasy", "ACTION and adventure"], MediaType.TV, genre_entry)
    assert ids == [10765, 10759]


def test_romance_id_for_tv_sets_flag(genre_entry):
    ids, romance = parse_genre_tokens(["10749"], MediaType.TV, genre_entry)
    assert ids == []
    assert romance is True


def test_romance_name_for_tv_sets_flag(genre_entry):
    ids, romance = parse_genre_tokens(["Romance"], MediaType.TV, genre_entry)
    assert ids == []
    assert romance is True


def test_romance_for_movies_is_a_regular_genre(genre_entry):
    ids, romance = parse_genre_tokens(["10749"], MediaType.MOVIE, genre_entry)
    assert ids == [10749]
    assert romance is False


def test_legacy_genres_populate_both_buckets(genre_entry):
    parsed = parse_search_genres(genre_entry, legacy_genres="drama,28")
    assert parsed.movie_ids == [18, 28]
    assert parsed.tv_ids == [18]


def test_legacy_genres_ignored_when_specific_params_given(genre_entry):
    parsed = parse_search_genres(genre_entry, movie_genres="35", legacy_genres="drama")
    assert parsed.movie_ids == [35]
    assert parsed.tv_ids == []


def test_legacy_romance_hits_movies_and_flags_tv(genre_entry):
    parsed = parse_search_genres(genre_entry, legacy_genres="romance")
    assert parsed.movie_ids == [10749]
    assert parsed.romance_flag is True


def test_unknown_genres_are_not_advanced(genre_entry):
    parsed = parse_search_genres(genre_entry, movie_genres="nope", tv_genres="123456")
    assert parsed.is_advanced is False


# =============================================================================
# AGGREGATOR
# =============================================================================

@pytest.fixture
def aggregator(mock_tmdb, mock_resolver):
    return SearchAggregator(mock_tmdb, mock_resolver)


@pytest.mark.asyncio
async def test_movie_genre_returns_only_movies(aggregator, mock_tmdb):
    mock_tmdb.discover.return_value = {
        "results": [tmdb_movie(1), tmdb_movie(2)],
        "total_results": 2,
        "total_pages": 1,
    }

    response = await aggregator.search(movie_genres="28", tv_genres="")

    assert {r["media_type"] for r in response.results} == {"movie"}
    assert mock_tmdb.discover.await_count == 1
    media_type, params = mock_tmdb.discover.await_args.args
    assert media_type == MediaType.MOVIE
    assert params["with_genres"] == "28"
    assert params["sort_by"] == "popularity.desc"
    assert params["include_adult"] == "false"


@pytest.mark.asyncio
async def test_tv_romance_falls_back_to_text_search(aggregator, mock_tmdb):
    mock_tmdb.search.return_value = {
        "results": [tmdb_show(10), tmdb_show(11)],
        "total_results": 2,
        "total_pages": 1,
    }

    response = await aggregator.search(tv_genres="10749")

    mock_tmdb.discover.assert_not_awaited()
    media_type, query = mock_tmdb.search.await_args.args
    assert media_type == MediaType.TV
    assert query == "romance"
    assert {r["media_type"] for r in response.results} == {"tv"}


@pytest.mark.asyncio
async def test_romance_flag_ignored_when_other_tv_genres_present(aggregator, mock_tmdb):
    await aggregator.search(tv_genres="10749,18")

    mock_tmdb.search.assert_not_awaited()
    media_type, params = mock_tmdb.discover.await_args.args
    assert media_type == MediaType.TV
    assert params["with_genres"] == "18"


@pytest.mark.asyncio
async def test_no_query_and_no_genres_is_bad_request(aggregator, mock_tmdb):
    with pytest.raises(BadRequestError):
        await aggregator.search(query="   ")
    mock_tmdb.search_multi.assert_not_awaited()


@pytest.mark.asyncio
async def test_advanced_results_sorted_newest_first(aggregator, mock_tmdb):
    async def discover(media_type, params):
        if media_type == MediaType.MOVIE:
            return {
                "results": [tmdb_movie(1, "2020-05-01"), tmdb_movie(2, "")],
                "total_results": 40,
                "total_pages": 2,
            }
        return {
            "results": [tmdb_show(3, "2023-02-01"), tmdb_show(4, "2021-07-15")],
            "total_results": 100,
            "total_pages": 5,
        }

    mock_tmdb.discover = AsyncMock(side_effect=discover)

    response = await aggregator.search(movie_genres="action", tv_genres="drama", page=2)

    assert [r["id"] for r in response.results] == [3, 4, 1, 2]
    assert response.total_results == 140
    assert response.total_pages == 5
    assert response.page == 2


@pytest.mark.asyncio
async def test_advanced_search_dedupes_items(aggregator, mock_tmdb):
    mock_tmdb.discover.return_value = {
        "results": [tmdb_movie(1), tmdb_movie(1)],
        "total_results": 2,
        "total_pages": 1,
    }

    response = await aggregator.search(movie_genres="28")

    assert len(response.results) == 1


@pytest.mark.asyncio
async def test_discover_failure_fails_search(aggregator, mock_tmdb):
    mock_tmdb.discover = AsyncMock(side_effect=UpstreamError(401, "Invalid API key"))

    with pytest.raises(UpstreamError) as exc_info:
        await aggregator.search(movie_genres="28")

    assert exc_info.value.status_code == 401


@pytest.mark.asyncio
async def test_text_search_filters_people(aggregator, mock_tmdb):
    mock_tmdb.search_multi.return_value = {
        "results": [
            tmdb_movie(1, media_type="movie"),
            {"id": 2, "name": "Some Actor", "media_type": "person"},
            tmdb_show(3, media_type="tv"),
        ],
        "total_results": 3,
        "total_pages": 1,
        "page": 1,
    }

    response = await aggregator.search(query="dark")

    assert [(r["id"], r["media_type"]) for r in response.results] == [(1, "movie"), (3, "tv")]
    assert response.results[1]["title"] == "Show 3"
    assert response.results[1]["release_date"] == "2024-01-01"
    assert response.total_results == 3
    mock_tmdb.search_multi.assert_awaited_once_with("dark", page=1, language="en-US")


@pytest.mark.parametrize("token", ["²", "٣", "①"])
def test_non_ascii_digit_tokens_are_dropped(genre_entry, token):
    ids, romance = parse_genre_tokens([token, "28"], MediaType.MOVIE, genre_entry)
    assert ids == [28]
    assert romance is False


@pytest.mark.asyncio
async def test_unicode_digit_genre_is_not_a_server_error(aggregator, mock_tmdb):
    with pytest.raises(BadRequestError):
        await aggregator.search(movie_genres="²")
    mock_tmdb.discover.assert_not_awaited()
