"""
History API Router

View history: one event per view, read back deduplicated per title.
"""

from typing import Any, Dict, List
from fastapi import APIRouter, Depends

from ..core.exceptions import ForbiddenError
from ..core.logging import get_logger
from ..core.security import get_current_user
from ..models.user_lists import AddHistoryRequest, HistoryEntry
from ..services.firestore_service import FirestoreService, get_firestore_service

logger = get_logger(__name__)

router = APIRouter(prefix="/api/history", tags=["history"])


def _require_owner(user_id: str, current_user: dict):
    if user_id != current_user["uid"]:
        logger.warning("history_access_denied", uid=current_user["uid"], target=user_id)
        raise ForbiddenError("Cannot access another user's history")


@router.post("", status_code=201)
async def record_view(
    body: AddHistoryRequest,
    current_user: dict = Depends(get_current_user),
    store: FirestoreService = Depends(get_firestore_service),
):
    entry = await store.add_history_entry(
        current_user["uid"],
        HistoryEntry(movieId=body.movie_id, title=body.title, genreIds=body.genre_ids),
    )
    return {"success": True, "entry": entry.model_dump(mode="json", by_alias=True)}


@router.get("/{user_id}", response_model=List[Dict[str, Any]])
async def get_history(
    user_id: str,
    current_user: dict = Depends(get_current_user),
    store: FirestoreService = Depends(get_firestore_service),
):
    """Most recent view per title, newest first."""
    _require_owner(user_id, current_user)
    entries = await store.get_history(user_id)
    return [entry.model_dump(mode="json", by_alias=True) for entry in entries]


@router.delete("/{user_id}")
async def clear_history(
    user_id: str,
    current_user: dict = Depends(get_current_user),
    store: FirestoreService = Depends(get_firestore_service),
):
    _require_owner(user_id, current_user)
    await store.clear_history(user_id)
    return {"success": True, "message": "History cleared"}
