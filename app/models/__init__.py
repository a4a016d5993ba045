"""Pydantic models for the movie discovery backend."""

from .media import MediaType, NormalizedMediaItem, EnrichedMediaItem
from .genre import Genre, GenreCacheEntry
from .user_lists import (
    WatchlistEntry,
    HistoryEntry,
    AddWatchlistRequest,
    AddHistoryRequest,
    UpdateNameRequest,
)
from .response import SearchResponse, ErrorResponse

__all__ = [
    "MediaType",
    "NormalizedMediaItem",
    "EnrichedMediaItem",
    "Genre",
    "GenreCacheEntry",
    "WatchlistEntry",
    "HistoryEntry",
    "AddWatchlistRequest",
    "AddHistoryRequest",
    "UpdateNameRequest",
    "SearchResponse",
    "ErrorResponse",
]
