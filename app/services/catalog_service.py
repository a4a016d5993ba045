"""
Catalog Service

Browse endpoints (trending, popular, top rated), item details and
watchlist hydration. Everything that lists items attaches trailers
through the TrailerEnricher.
"""

import asyncio
from typing import Any, Dict, List, Optional

from ..core.exceptions import MovieBackendException
from ..core.logging import get_logger
from ..core.result import Err, Ok, Result, unwrap_or_none
from ..models.genre import GenreCacheEntry
from ..models.media import EnrichedMediaItem, MediaType
from ..models.user_lists import WatchlistEntry
from .genre_service import GenreResolver, get_genre_resolver
from .tmdb_client import TMDbClient, get_tmdb_client
from .trailer_service import TrailerEnricher, get_trailer_enricher

logger = get_logger(__name__)

# Fields copied onto watchlist entries from the details call
HYDRATED_FIELDS = ("overview", "poster_path", "backdrop_path", "vote_average")


class CatalogService:
    """TMDB browse/detail lookups shaped for the frontend."""

    def __init__(
        self,
        tmdb: TMDbClient,
        enricher: TrailerEnricher,
        genre_resolver: GenreResolver,
    ):
        self.tmdb = tmdb
        self.enricher = enricher
        self.genre_resolver = genre_resolver

    async def trending_picks(
        self,
        media_type: MediaType = MediaType.MOVIE,
        language: str = "en-US",
        region: Optional[str] = None,
        original_language: Optional[str] = None,
        limit: int = 6,
    ) -> List[EnrichedMediaItem]:
        """
        Top trending titles with trailers.

        With `original_language` this switches to a popularity-sorted
        discover call filtered by that language (e.g. "hi" for Bollywood).
        """
        if original_language:
            payload = await self.tmdb.discover(media_type, {
                "language": language,
                "sort_by": "popularity.desc",
                "with_original_language": original_language,
                "region": region,
            })
        else:
            payload = await self.tmdb.trending(media_type, "week", language=language, region=region)

        picks = payload.get("results", [])[:limit]
        # Trending results tag their own media_type; the requested type wins
        picks = [{**item, "media_type": media_type.value} for item in picks]

        logger.info(
            "trending_picks",
            media_type=media_type.value,
            original_language=original_language,
            count=len(picks),
        )
        return await self.enricher.enrich(picks, media_type)

    async def movie_list(
        self,
        list_name: str,
        language: str = "en-US",
        page: int = 1,
        limit: int = 20,
    ) -> List[EnrichedMediaItem]:
        """Curated movie list (`popular` / `top_rated`) with trailers."""
        payload = await self.tmdb.movie_list(list_name, language=language, page=page)
        items = payload.get("results", [])[:limit]
        return await self.enricher.enrich(items, MediaType.MOVIE)

    async def details(self, media_type: MediaType, tmdb_id: int) -> Dict[str, Any]:
        """
        Full upstream details plus `trailerKey`.

        Details and videos are fetched concurrently; a failed videos call
        only nulls the trailer.
        """
        data, trailer = await asyncio.gather(
            self.tmdb.details(media_type, tmdb_id),
            self.enricher.lookup_trailer_key(media_type, tmdb_id),
        )

        if isinstance(trailer, Err):
            logger.warning(
                "details_videos_failed",
                media_type=media_type.value,
                tmdb_id=tmdb_id,
                reason=trailer.reason,
            )

        return {**data, "trailerKey": unwrap_or_none(trailer)}

    async def genres(self, language: str = "en-US") -> Dict[str, Any]:
        entry: GenreCacheEntry = await self.genre_resolver.resolve(language)
        return {
            "language": language,
            "movie": [g.model_dump() for g in entry.movie_genres],
            "tv": [g.model_dump() for g in entry.tv_genres],
        }

    # =========================================================================
    # WATCHLIST HYDRATION
    # =========================================================================

    async def _fetch_details(self, entry: WatchlistEntry) -> Result[Dict[str, Any]]:
        try:
            return Ok(await self.tmdb.details(MediaType(entry.media_type), entry.movie_id))
        except (MovieBackendException, ValueError) as e:
            return Err(str(e))

    async def hydrate_watchlist(self, entries: List[WatchlistEntry]) -> List[Dict[str, Any]]:
        """
        Stored watchlist entries merged with live details.

        A failed details fetch leaves the hydrated fields null for that
        entry only.
        """
        results = await asyncio.gather(*(self._fetch_details(e) for e in entries))

        hydrated = []
        for entry, result in zip(entries, results):
            item = entry.model_dump(by_alias=True)
            details = unwrap_or_none(result) or {}
            if isinstance(result, Err):
                logger.warning("watchlist_hydration_failed", movie_id=entry.movie_id, reason=result.reason)
            for field in HYDRATED_FIELDS:
                item[field] = details.get(field)
            if not item.get("posterPath"):
                item["posterPath"] = details.get("poster_path")
            hydrated.append(item)

        return hydrated


# Singleton
_catalog_service: Optional[CatalogService] = None


def get_catalog_service() -> CatalogService:
    global _catalog_service
    if _catalog_service is None:
        _catalog_service = CatalogService(
            get_tmdb_client(),
            get_trailer_enricher(),
            get_genre_resolver(),
        )
    return _catalog_service
