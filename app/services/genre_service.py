"""
Genre Service

Resolves TMDB's movie and TV genre taxonomies per language and keeps them
in the cache for 24 hours. Also owns genre-name normalization, which is
used both when building the lookup tables and when matching user input.
"""

import asyncio
import re
from datetime import datetime, timedelta
from typing import Any, Callable, Dict, List, Optional

from pydantic import ValidationError

from ..config import get_settings
from ..core.exceptions import ConfigurationError, MovieBackendException
from ..core.logging import get_logger
from ..models.genre import Genre, GenreCacheEntry, utcnow
from ..models.media import MediaType
from .cache_service import CacheService, get_cache_service
from .tmdb_client import TMDbClient, get_tmdb_client

logger = get_logger(__name__)

# TMDB's TV bucket for science fiction; used when the list lacks it
SCI_FI_FANTASY_TV_ID = 10765

# synonym -> (movie genre name, tv genre name), all normalized
GENRE_SYNONYMS = {
    "sci fi": ("science fiction", "sci fi and fantasy"),
    "scifi": ("science fiction", "sci fi and fantasy"),
}

_SEPARATORS = re.compile(r"[-_]+")
_WHITESPACE = re.compile(r"\s+")


def normalize_genre_name(name: str) -> str:
    """
    Canonical form for genre names.

    "Sci-Fi & Fantasy" -> "sci fi and fantasy"
    """
    text = (name or "").lower().replace("&", " and ")
    text = _SEPARATORS.sub(" ", text)
    return _WHITESPACE.sub(" ", text).strip()


def build_genre_entry(
    language: str,
    movie_genres: List[Dict[str, Any]],
    tv_genres: List[Dict[str, Any]],
    expires_at: datetime,
) -> GenreCacheEntry:
    """Build the lookup tables for one language from raw genre lists."""
    movie = [Genre(**g) for g in movie_genres if "id" in g and "name" in g]
    tv = [Genre(**g) for g in tv_genres if "id" in g and "name" in g]

    movie_name_to_id = {normalize_genre_name(g.name): g.id for g in movie}
    tv_name_to_id = {normalize_genre_name(g.name): g.id for g in tv}

    for synonym, (movie_name, tv_name) in GENRE_SYNONYMS.items():
        if movie_name in movie_name_to_id:
            movie_name_to_id.setdefault(synonym, movie_name_to_id[movie_name])
        tv_name_to_id.setdefault(synonym, tv_name_to_id.get(tv_name, SCI_FI_FANTASY_TV_ID))

    return GenreCacheEntry(
        language=language,
        movie_ids={g.id for g in movie},
        tv_ids={g.id for g in tv},
        movie_name_to_id=movie_name_to_id,
        tv_name_to_id=tv_name_to_id,
        movie_genres=movie,
        tv_genres=tv,
        expires_at=expires_at,
    )


class GenreResolver:
    """
    Per-language genre cache in front of TMDB's /genre/{type}/list.

    Concurrent misses for the same language share one in-flight refresh,
    so a cold cache costs exactly one pair of upstream calls.
    """

    CACHE_KEY_PREFIX = "genres:"

    def __init__(
        self,
        tmdb: TMDbClient,
        cache: CacheService,
        ttl_seconds: Optional[int] = None,
        clock: Callable[[], datetime] = utcnow,
        degraded_ttl_seconds: Optional[int] = None,
    ):
        settings = get_settings()
        self.tmdb = tmdb
        self.cache = cache
        self.ttl = timedelta(
            seconds=ttl_seconds if ttl_seconds is not None else settings.genre_cache_ttl_seconds
        )
        self.degraded_ttl = timedelta(
            seconds=degraded_ttl_seconds if degraded_ttl_seconds is not None
            else settings.genre_degraded_ttl_seconds
        )
        self._clock = clock
        self._inflight: Dict[str, asyncio.Future] = {}

    async def resolve(self, language: str) -> GenreCacheEntry:
        """Return the genre tables for `language`, fetching them on a miss."""
        cached = await self._load_cached(language)
        if cached is not None:
            return cached

        task = self._inflight.get(language)
        if task is None:
            task = asyncio.ensure_future(self._refresh(language))
            self._inflight[language] = task
            task.add_done_callback(lambda done: self._forget(language, done))
        else:
            logger.debug("genre_refresh_joined", language=language)

        return await asyncio.shield(task)

    def _forget(self, language: str, task: asyncio.Future):
        if self._inflight.get(language) is task:
            del self._inflight[language]

    async def _load_cached(self, language: str) -> Optional[GenreCacheEntry]:
        raw = await self.cache.get(self.CACHE_KEY_PREFIX + language)
        if not raw:
            return None

        try:
            entry = GenreCacheEntry.model_validate_json(raw)
        except ValidationError as e:
            logger.warning("genre_cache_entry_invalid", language=language, error=str(e))
            return None

        if entry.is_expired(self._clock()):
            return None
        return entry

    async def _refresh(self, language: str) -> GenreCacheEntry:
        movie_genres, tv_genres = await asyncio.gather(
            self._fetch_genres(MediaType.MOVIE, language),
            self._fetch_genres(MediaType.TV, language),
        )

        # A list that failed to load is only cached briefly
        degraded = movie_genres is None or tv_genres is None
        ttl = self.degraded_ttl if degraded else self.ttl

        now = self._clock()
        entry = build_genre_entry(language, movie_genres or [], tv_genres or [], now + ttl)
        await self.cache.set(
            self.CACHE_KEY_PREFIX + language,
            entry.model_dump_json(),
            entry.ttl_seconds(now),
        )

        logger.info(
            "genre_cache_refreshed",
            language=language,
            movie_genres=len(entry.movie_ids),
            tv_genres=len(entry.tv_ids),
            degraded=degraded,
        )
        return entry

    async def _fetch_genres(self, media_type: MediaType, language: str) -> Optional[List[Dict[str, Any]]]:
        """
        Fetch one genre list.

        Upstream failures return None so the entry is cached as degraded.
        A missing API key is a server error and propagates.
        """
        try:
            return await self.tmdb.genre_list(media_type, language)
        except ConfigurationError:
            raise
        except (MovieBackendException, ValueError) as e:
            logger.warning(
                "genre_list_fetch_failed",
                media_type=media_type.value,
                language=language,
                error=str(e),
            )
            return None


# Singleton
_genre_resolver: Optional[GenreResolver] = None


def get_genre_resolver() -> GenreResolver:
    global _genre_resolver
    if _genre_resolver is None:
        _genre_resolver = GenreResolver(get_tmdb_client(), get_cache_service())
    return _genre_resolver
