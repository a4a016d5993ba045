"""
Recommendation Service

Genre-frequency recommendations from a user's watchlist and history.
"""

import asyncio
from collections import Counter
from typing import Dict, List, Optional, Union

from ..config import get_settings
from ..core.logging import get_logger
from ..models.media import EnrichedMediaItem, MediaType
from ..models.user_lists import HistoryEntry, WatchlistEntry
from .firestore_service import FirestoreService, get_firestore_service
from .tmdb_client import TMDbClient, get_tmdb_client
from .trailer_service import TrailerEnricher, get_trailer_enricher

logger = get_logger(__name__)

UserListEntry = Union[WatchlistEntry, HistoryEntry]


def combine_user_entries(
    watchlist: List[WatchlistEntry],
    history: List[HistoryEntry],
) -> List[UserListEntry]:
    """Watchlist then history, deduplicated by movieId (first wins)."""
    combined: Dict[int, UserListEntry] = {}
    for entry in [*watchlist, *history]:
        combined.setdefault(entry.movie_id, entry)
    return list(combined.values())


def top_genres(entries: List[UserListEntry], count: int = 3) -> List[int]:
    """Most frequent genre IDs; ties go to the lowest genre ID."""
    tally = Counter(gid for entry in entries for gid in entry.genre_ids)
    ranked = sorted(tally.items(), key=lambda pair: (-pair[1], pair[0]))
    return [gid for gid, _ in ranked[:count]]


class RecommendationService:
    """
    Recommends popular movies in the user's favourite genres.

    1. Combine watchlist + history (unique by movieId)
    2. Tally genre IDs, keep the top three
    3. One discover/movie call (any of those genres, by popularity)
    4. Drop titles the user already has, cap, attach trailers
    """

    def __init__(
        self,
        store: FirestoreService,
        tmdb: TMDbClient,
        enricher: TrailerEnricher,
        limit: Optional[int] = None,
        genre_count: Optional[int] = None,
    ):
        settings = get_settings()
        self.store = store
        self.tmdb = tmdb
        self.enricher = enricher
        self.limit = limit if limit is not None else settings.recommendation_limit
        self.genre_count = genre_count if genre_count is not None else settings.recommendation_top_genres

    async def recommend(self, user_id: str) -> List[EnrichedMediaItem]:
        watchlist, history = await asyncio.gather(
            self.store.get_watchlist(user_id),
            self.store.get_history(user_id),
        )

        entries = combine_user_entries(watchlist, history)
        if not entries:
            logger.info("recommendations_no_history", uid=user_id)
            return []

        genre_ids = top_genres(entries, self.genre_count)
        if not genre_ids:
            logger.info("recommendations_no_genres", uid=user_id, titles=len(entries))
            return []

        payload = await self.tmdb.discover(MediaType.MOVIE, {
            "with_genres": "|".join(str(gid) for gid in genre_ids),
            "sort_by": "popularity.desc",
            "include_adult": "false",
        })

        known_ids = {entry.movie_id for entry in entries}
        picks = [
            item for item in payload.get("results", [])
            if item.get("id") not in known_ids
        ][:self.limit]

        logger.info(
            "recommendations_generated",
            uid=user_id,
            genres=genre_ids,
            candidates=len(payload.get("results", [])),
            returned=len(picks),
        )
        return await self.enricher.enrich(picks, MediaType.MOVIE)


# Singleton
_recommendation_service: Optional[RecommendationService] = None


def get_recommendation_service() -> RecommendationService:
    global _recommendation_service
    if _recommendation_service is None:
        _recommendation_service = RecommendationService(
            get_firestore_service(),
            get_tmdb_client(),
            get_trailer_enricher(),
        )
    return _recommendation_service
