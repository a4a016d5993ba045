"""
Firestore Service

Persistence for per-user watchlists, watch history and profile fields.

Collections used:
- watchlists/{uid}: {userId, movies: [WatchlistEntry], updatedAt}
- history/{uid}: {userId, watchedMovies: [HistoryEntry], updatedAt}
- users/{uid}: profile fields (name)
"""

import asyncio
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple

from firebase_admin import firestore

from ..core.exceptions import PersistenceError
from ..core.logging import get_logger
from ..core.security import initialize_firebase
from ..models.user_lists import HistoryEntry, WatchlistEntry

logger = get_logger(__name__)

WATCHLIST_COLLECTION = "watchlists"
HISTORY_COLLECTION = "history"
USERS_COLLECTION = "users"

# Firestore client singleton
_db = None


def get_firestore_client():
    """Get or initialize Firestore client."""
    global _db
    if _db is None:
        initialize_firebase()
        _db = firestore.client()
    return _db


def add_unique_entry(
    movies: List[Dict[str, Any]],
    record: Dict[str, Any],
) -> Tuple[List[Dict[str, Any]], bool]:
    """
    Add-to-set on movieId.

    Returns:
        (updated list, whether the record was added)
    """
    if any(m.get("movieId") == record["movieId"] for m in movies):
        return movies, False
    return movies + [record], True


def latest_views(entries: List[HistoryEntry]) -> List[HistoryEntry]:
    """Keep the most recent view per movieId, newest first."""
    latest: Dict[int, HistoryEntry] = {}
    epoch = datetime.min.replace(tzinfo=timezone.utc)

    def viewed(entry: HistoryEntry) -> datetime:
        if entry.viewed_at is None:
            return epoch
        if entry.viewed_at.tzinfo is None:
            return entry.viewed_at.replace(tzinfo=timezone.utc)
        return entry.viewed_at

    for entry in entries:
        current = latest.get(entry.movie_id)
        if current is None or viewed(entry) > viewed(current):
            latest[entry.movie_id] = entry

    return sorted(latest.values(), key=viewed, reverse=True)


class FirestoreService:
    """
    Firestore operations for user lists.

    The Firestore client is synchronous; every call runs in a worker thread.
    Any store failure is logged with its details and re-raised as
    `PersistenceError` (HTTP 500 with a generic message).
    """

    def __init__(self, db=None):
        self.db = db if db is not None else get_firestore_client()

    async def _run(self, operation: str, func, *args):
        try:
            return await asyncio.to_thread(func, *args)
        except Exception as e:
            logger.error("firestore_operation_failed", operation=operation, error=str(e))
            raise PersistenceError(operation) from e

    # =========================================================================
    # WATCHLIST
    # =========================================================================

    async def get_watchlist(self, user_id: str) -> List[WatchlistEntry]:
        """Load a user's watchlist (empty if the user has none yet)."""
        def _load():
            doc = self.db.collection(WATCHLIST_COLLECTION).document(user_id).get()
            if not doc.exists:
                return []
            return (doc.to_dict() or {}).get("movies", [])

        movies = await self._run("get_watchlist", _load)
        return [WatchlistEntry.model_validate(m) for m in movies]

    async def add_to_watchlist(self, user_id: str, entry: WatchlistEntry) -> bool:
        """
        Add a title unless one with the same movieId is already present.

        Read and write happen in one transaction so concurrent adds cannot
        produce duplicates.
        """
        record = entry.model_dump(by_alias=True)
        record["addedAt"] = record.get("addedAt") or datetime.now(timezone.utc)
        doc_ref = self.db.collection(WATCHLIST_COLLECTION).document(user_id)

        def _add():
            transaction = self.db.transaction()

            @firestore.transactional
            def _apply(transaction):
                snapshot = doc_ref.get(transaction=transaction)
                movies = (snapshot.to_dict() or {}).get("movies", []) if snapshot.exists else []
                updated, added = add_unique_entry(movies, record)
                if added:
                    transaction.set(doc_ref, {
                        "userId": user_id,
                        "movies": updated,
                        "updatedAt": firestore.SERVER_TIMESTAMP,
                    }, merge=True)
                return added

            return _apply(transaction)

        added = await self._run("add_to_watchlist", _add)
        logger.info("watchlist_add", uid=user_id, movie_id=entry.movie_id, added=added)
        return added

    async def remove_from_watchlist(self, user_id: str, movie_id: int) -> bool:
        """Remove a title by movieId. Returns False if it was not there."""
        doc_ref = self.db.collection(WATCHLIST_COLLECTION).document(user_id)

        def _remove():
            transaction = self.db.transaction()

            @firestore.transactional
            def _apply(transaction):
                snapshot = doc_ref.get(transaction=transaction)
                if not snapshot.exists:
                    return False
                movies = (snapshot.to_dict() or {}).get("movies", [])
                remaining = [m for m in movies if m.get("movieId") != movie_id]
                if len(remaining) == len(movies):
                    return False
                transaction.update(doc_ref, {
                    "movies": remaining,
                    "updatedAt": firestore.SERVER_TIMESTAMP,
                })
                return True

            return _apply(transaction)

        removed = await self._run("remove_from_watchlist", _remove)
        logger.info("watchlist_remove", uid=user_id, movie_id=movie_id, removed=removed)
        return removed

    # =========================================================================
    # HISTORY
    # =========================================================================

    async def get_history(self, user_id: str, dedupe: bool = True) -> List[HistoryEntry]:
        """
        Load a user's view history.

        With `dedupe`, only the most recent view per movieId is kept,
        ordered newest first.
        """
        def _load():
            doc = self.db.collection(HISTORY_COLLECTION).document(user_id).get()
            if not doc.exists:
                return []
            return (doc.to_dict() or {}).get("watchedMovies", [])

        raw = await self._run("get_history", _load)
        entries = [HistoryEntry.model_validate(m) for m in raw]
        return latest_views(entries) if dedupe else entries

    async def add_history_entry(self, user_id: str, entry: HistoryEntry) -> HistoryEntry:
        """Append one view event (repeats are kept)."""
        if entry.viewed_at is None:
            entry = entry.model_copy(update={"viewed_at": datetime.now(timezone.utc)})
        record = entry.model_dump(by_alias=True)

        def _append():
            self.db.collection(HISTORY_COLLECTION).document(user_id).set({
                "userId": user_id,
                "watchedMovies": firestore.ArrayUnion([record]),
                "updatedAt": firestore.SERVER_TIMESTAMP,
            }, merge=True)

        await self._run("add_history_entry", _append)
        logger.info("history_add", uid=user_id, movie_id=entry.movie_id)
        return entry

    async def clear_history(self, user_id: str):
        def _clear():
            self.db.collection(HISTORY_COLLECTION).document(user_id).delete()

        await self._run("clear_history", _clear)
        logger.info("history_cleared", uid=user_id)

    # =========================================================================
    # PROFILE
    # =========================================================================

    async def update_user_name(self, user_id: str, name: str) -> Dict[str, Any]:
        def _update():
            doc_ref = self.db.collection(USERS_COLLECTION).document(user_id)
            doc_ref.set({"name": name, "updatedAt": firestore.SERVER_TIMESTAMP}, merge=True)
            return doc_ref.get().to_dict() or {}

        data = await self._run("update_user_name", _update)
        logger.info("user_name_updated", uid=user_id)
        return {"id": user_id, "name": data.get("name", name), "email": data.get("email")}


# Singleton instance
_firestore_service: Optional[FirestoreService] = None


def get_firestore_service() -> FirestoreService:
    """Get singleton FirestoreService instance."""
    global _firestore_service
    if _firestore_service is None:
        _firestore_service = FirestoreService()
    return _firestore_service
