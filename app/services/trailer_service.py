"""
Trailer Service

Attaches a YouTube trailer URL to media items. One /videos lookup per
item, all issued concurrently; a failed lookup only affects its own item.
"""

import asyncio
from typing import Any, Dict, List, Optional

from ..core.exceptions import MovieBackendException
from ..core.logging import get_logger
from ..core.result import Err, Ok, Result
from ..models.media import EnrichedMediaItem, MediaType, NormalizedMediaItem
from .tmdb_client import TMDbClient, get_tmdb_client

logger = get_logger(__name__)

YOUTUBE_WATCH_URL = "https://www.youtube.com/watch?v={key}"


def pick_trailer_key(videos: List[Dict[str, Any]]) -> Optional[str]:
    """First YouTube entry of type Trailer, or None."""
    for video in videos:
        if video.get("type") == "Trailer" and video.get("site") == "YouTube" and video.get("key"):
            return video["key"]
    return None


def trailer_url(key: Optional[str]) -> Optional[str]:
    return YOUTUBE_WATCH_URL.format(key=key) if key else None


def item_media_type(item: Dict[str, Any], default: MediaType) -> MediaType:
    """Media type from the item itself (multi-search/trending tag it), else default."""
    try:
        return MediaType(item.get("media_type"))
    except ValueError:
        return default


class TrailerEnricher:
    """Trailer lookups against TMDB's /{type}/{id}/videos."""

    def __init__(self, tmdb: TMDbClient):
        self.tmdb = tmdb

    async def lookup_trailer_key(self, media_type: MediaType, tmdb_id: int) -> Result[Optional[str]]:
        """
        Look up the trailer key for one item.

        Returns:
            Ok(key) when a trailer exists, Ok(None) when none does,
            Err(reason) when the lookup itself failed.
        """
        try:
            videos = await self.tmdb.videos(media_type, tmdb_id)
        except (MovieBackendException, ValueError) as e:
            return Err(str(e))
        return Ok(pick_trailer_key(videos))

    async def enrich(
        self,
        items: List[Dict[str, Any]],
        default_media_type: MediaType,
    ) -> List[EnrichedMediaItem]:
        """
        Normalize raw TMDB items and attach `trailerUrl` to each.

        Output order matches input order. Failed lookups yield
        `trailerUrl: None` and are logged.
        """
        return list(await asyncio.gather(
            *(self._enrich_one(item, default_media_type) for item in items)
        ))

    async def _enrich_one(self, item: Dict[str, Any], default_media_type: MediaType) -> EnrichedMediaItem:
        media_type = item_media_type(item, default_media_type)
        base = NormalizedMediaItem.from_tmdb(item, media_type)

        result = await self.lookup_trailer_key(media_type, base.id)
        if isinstance(result, Err):
            logger.warning(
                "trailer_lookup_failed",
                tmdb_id=base.id,
                media_type=media_type.value,
                title=base.title,
                reason=result.reason,
            )
            key = None
        else:
            key = result.value

        return EnrichedMediaItem(**base.model_dump(), trailerUrl=trailer_url(key))


# Singleton
_trailer_enricher: Optional[TrailerEnricher] = None


def get_trailer_enricher() -> TrailerEnricher:
    global _trailer_enricher
    if _trailer_enricher is None:
        _trailer_enricher = TrailerEnricher(get_tmdb_client())
    return _trailer_enricher
