"""
Search Service

Unified text/genre search over TMDB.

Two modes:
- Advanced: any genre filter present. Movie and TV discover calls run
  concurrently, results are merged and ordered newest first.
- Text: plain multi-search on `query`, people filtered out.
"""

import asyncio
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Set, Tuple

from ..core.exceptions import BadRequestError
from ..core.logging import get_logger
from ..models.genre import GenreCacheEntry
from ..models.media import MediaType, NormalizedMediaItem
from ..models.response import SearchResponse
from .genre_service import GenreResolver, get_genre_resolver, normalize_genre_name
from .tmdb_client import TMDbClient, get_tmdb_client
from .trailer_service import item_media_type

logger = get_logger(__name__)

# TMDB's TV taxonomy has no Romance genre; the movie ID stands in for it
ROMANCE_GENRE_ID = 10749
ROMANCE_GENRE_NAME = "romance"


@dataclass
class ParsedGenres:
    """Genre filters after validation against the taxonomy."""
    movie_ids: List[int] = field(default_factory=list)
    tv_ids: List[int] = field(default_factory=list)
    romance_flag: bool = False

    @property
    def is_advanced(self) -> bool:
        return bool(self.movie_ids or self.tv_ids or self.romance_flag)


def split_genre_param(raw: Optional[str]) -> List[str]:
    """Comma-separated parameter -> trimmed, non-empty tokens."""
    if not raw:
        return []
    return [token.strip() for token in raw.split(",") if token.strip()]


def parse_genre_tokens(
    tokens: List[str],
    media_type: MediaType,
    genres: GenreCacheEntry,
) -> Tuple[List[int], bool]:
    """
    Resolve tokens (IDs or names) for one media type.

    Unknown tokens are dropped. For TV, Romance (by ID or name) sets the
    romance flag instead since TMDB has no such TV genre.

    Returns:
        (deduplicated genre IDs in first-seen order, romance flag)
    """
    if media_type == MediaType.MOVIE:
        known_ids, name_to_id = genres.movie_ids, genres.movie_name_to_id
    else:
        known_ids, name_to_id = genres.tv_ids, genres.tv_name_to_id

    ids: List[int] = []
    seen: Set[int] = set()
    romance_flag = False

    for token in tokens:
        genre_id: Optional[int] = None

        if token.isdecimal():
            numeric = int(token)
            if numeric in known_ids:
                genre_id = numeric
            elif media_type == MediaType.TV and numeric == ROMANCE_GENRE_ID:
                romance_flag = True
        else:
            name = normalize_genre_name(token)
            genre_id = name_to_id.get(name)
            if genre_id is None and media_type == MediaType.TV and name == ROMANCE_GENRE_NAME:
                romance_flag = True

        if genre_id is not None and genre_id not in seen:
            seen.add(genre_id)
            ids.append(genre_id)

    return ids, romance_flag


def parse_search_genres(
    genres: GenreCacheEntry,
    movie_genres: Optional[str] = None,
    tv_genres: Optional[str] = None,
    legacy_genres: Optional[str] = None,
) -> ParsedGenres:
    """
    Parse the genre query parameters.

    The legacy `genres` parameter is only honored when neither
    `movieGenres` nor `tvGenres` is supplied; each of its tokens is tried
    against both taxonomies.
    """
    movie_tokens = split_genre_param(movie_genres)
    tv_tokens = split_genre_param(tv_genres)

    if not movie_tokens and not tv_tokens:
        legacy_tokens = split_genre_param(legacy_genres)
        movie_tokens = legacy_tokens
        tv_tokens = legacy_tokens

    movie_ids, _ = parse_genre_tokens(movie_tokens, MediaType.MOVIE, genres)
    tv_ids, romance_flag = parse_genre_tokens(tv_tokens, MediaType.TV, genres)

    return ParsedGenres(movie_ids=movie_ids, tv_ids=tv_ids, romance_flag=romance_flag)


def merge_by_release_date(
    pages: List[Tuple[MediaType, Dict[str, Any]]]
) -> List[NormalizedMediaItem]:
    """Merge per-source results, drop duplicates, newest release first."""
    merged: List[NormalizedMediaItem] = []
    seen: Set[Tuple[str, int]] = set()

    for media_type, payload in pages:
        for raw in payload.get("results", []):
            item = NormalizedMediaItem.from_tmdb(raw, media_type)
            key = (item.media_type, item.id)
            if key in seen:
                continue
            seen.add(key)
            merged.append(item)

    # ISO dates sort lexically; undated items go last
    merged.sort(key=lambda item: item.release_date or "", reverse=True)
    return merged


class SearchAggregator:
    """Backs GET /api/search."""

    def __init__(self, tmdb: TMDbClient, genre_resolver: GenreResolver):
        self.tmdb = tmdb
        self.genre_resolver = genre_resolver

    async def search(
        self,
        query: Optional[str] = None,
        movie_genres: Optional[str] = None,
        tv_genres: Optional[str] = None,
        genres: Optional[str] = None,
        language: str = "en-US",
        page: int = 1,
    ) -> SearchResponse:
        """
        Run a text or genre search.

        Raises:
            BadRequestError: neither a query nor any usable genre filter
            UpstreamError: a TMDB call failed
        """
        genre_tables = await self.genre_resolver.resolve(language)
        parsed = parse_search_genres(genre_tables, movie_genres, tv_genres, genres)

        if parsed.is_advanced:
            logger.info(
                "search_request",
                mode="advanced",
                movie_genres=parsed.movie_ids,
                tv_genres=parsed.tv_ids,
                romance=parsed.romance_flag,
                language=language,
                page=page,
            )
            return await self._advanced_search(parsed, language, page)

        if not query or not query.strip():
            raise BadRequestError("Search query is required.")

        logger.info("search_request", mode="text", query=query, language=language, page=page)
        return await self._text_search(query.strip(), language, page)

    async def _advanced_search(self, parsed: ParsedGenres, language: str, page: int) -> SearchResponse:
        calls = []
        if parsed.movie_ids:
            calls.append(self._discover(MediaType.MOVIE, parsed.movie_ids, language, page))
        if parsed.tv_ids:
            calls.append(self._discover(MediaType.TV, parsed.tv_ids, language, page))
        elif parsed.romance_flag:
            calls.append(self._romance_tv_search(language, page))

        pages = await asyncio.gather(*calls)
        items = merge_by_release_date(pages)

        return SearchResponse(
            results=[item.model_dump() for item in items],
            total_results=sum(payload.get("total_results", 0) for _, payload in pages),
            total_pages=max((payload.get("total_pages", 0) for _, payload in pages), default=0),
            page=page,
        )

    async def _discover(
        self,
        media_type: MediaType,
        genre_ids: List[int],
        language: str,
        page: int,
    ) -> Tuple[MediaType, Dict[str, Any]]:
        payload = await self.tmdb.discover(media_type, {
            "with_genres": ",".join(str(gid) for gid in genre_ids),
            "sort_by": "popularity.desc",
            "include_adult": "false",
            "vote_count.gte": 1,
            "language": language,
            "page": page,
        })
        return media_type, payload

    async def _romance_tv_search(self, language: str, page: int) -> Tuple[MediaType, Dict[str, Any]]:
        payload = await self.tmdb.search(MediaType.TV, ROMANCE_GENRE_NAME, page=page, language=language)
        return MediaType.TV, payload

    async def _text_search(self, query: str, language: str, page: int) -> SearchResponse:
        payload = await self.tmdb.search_multi(query, page=page, language=language)

        results = [
            NormalizedMediaItem.from_tmdb(raw, item_media_type(raw, MediaType.MOVIE)).model_dump()
            for raw in payload.get("results", [])
            if raw.get("media_type") != "person"
        ]

        return SearchResponse(
            results=results,
            total_results=payload.get("total_results", len(results)),
            total_pages=payload.get("total_pages", 1),
            page=payload.get("page", page),
        )


# Singleton
_search_aggregator: Optional[SearchAggregator] = None


def get_search_aggregator() -> SearchAggregator:
    global _search_aggregator
    if _search_aggregator is None:
        _search_aggregator = SearchAggregator(get_tmdb_client(), get_genre_resolver())
    return _search_aggregator
