"""
Watchlist API Router

Per-user watchlist stored in Firestore. The user ID always comes from
the verified token, never from the request.
"""

from typing import Any, Dict, List
from fastapi import APIRouter, Depends, Path

from ..core.logging import get_logger
from ..core.security import get_current_user
from ..models.user_lists import AddWatchlistRequest, WatchlistEntry, WatchlistMutationResponse
from ..services.catalog_service import CatalogService, get_catalog_service
from ..services.firestore_service import FirestoreService, get_firestore_service

logger = get_logger(__name__)

router = APIRouter(prefix="/api/watchlist", tags=["watchlist"])


@router.get("", response_model=List[Dict[str, Any]])
async def get_watchlist(
    current_user: dict = Depends(get_current_user),
    store: FirestoreService = Depends(get_firestore_service),
    catalog: CatalogService = Depends(get_catalog_service),
):
    """Watchlist entries with live poster/overview/rating from TMDB."""
    entries = await store.get_watchlist(current_user["uid"])
    return await catalog.hydrate_watchlist(entries)


@router.post("", response_model=WatchlistMutationResponse)
async def add_to_watchlist(
    body: AddWatchlistRequest,
    current_user: dict = Depends(get_current_user),
    store: FirestoreService = Depends(get_firestore_service),
):
    """Add a title; adding one that is already there is a no-op."""
    entry = WatchlistEntry(
        movieId=body.movie_id,
        title=body.title,
        genreIds=body.genre_ids,
        posterPath=body.poster_path,
        mediaType=body.media_type,
    )
    added = await store.add_to_watchlist(current_user["uid"], entry)

    return WatchlistMutationResponse(
        success=True,
        movieId=body.movie_id,
        changed=added,
        message="Added to watchlist" if added else "Already in watchlist",
    )


@router.delete("/{movie_id}", response_model=WatchlistMutationResponse)
async def remove_from_watchlist(
    movie_id: int = Path(..., gt=0),
    current_user: dict = Depends(get_current_user),
    store: FirestoreService = Depends(get_firestore_service),
):
    removed = await store.remove_from_watchlist(current_user["uid"], movie_id)

    return WatchlistMutationResponse(
        success=True,
        movieId=movie_id,
        changed=removed,
        message="Removed from watchlist" if removed else "Not in watchlist",
    )
