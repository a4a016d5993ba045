"""
User List Models

Watchlist and watch-history entries stored per user in Firestore, plus
the request bodies that create them.
"""

from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, Field, ConfigDict, field_validator

from .media import MediaType


class WatchlistEntry(BaseModel):
    """One title in a user's watchlist (unique by movieId)."""
    movie_id: int = Field(..., alias="movieId")
    title: str
    genre_ids: List[int] = Field(default_factory=list, alias="genreIds")
    poster_path: Optional[str] = Field(None, alias="posterPath")
    media_type: MediaType = Field(default=MediaType.MOVIE, alias="mediaType")
    added_at: Optional[datetime] = Field(None, alias="addedAt")

    model_config = ConfigDict(populate_by_name=True, use_enum_values=True)


class HistoryEntry(BaseModel):
    """One view event. The same movieId may appear many times."""
    movie_id: int = Field(..., alias="movieId")
    title: Optional[str] = None
    genre_ids: List[int] = Field(default_factory=list, alias="genreIds")
    viewed_at: Optional[datetime] = Field(None, alias="viewedAt")

    model_config = ConfigDict(populate_by_name=True)


class AddWatchlistRequest(BaseModel):
    """Request body for POST /api/watchlist."""
    movie_id: int = Field(..., alias="movieId", gt=0)
    title: str = Field(..., min_length=1)
    genre_ids: List[int] = Field(default_factory=list, alias="genreIds")
    poster_path: Optional[str] = Field(None, alias="posterPath")
    media_type: MediaType = Field(default=MediaType.MOVIE, alias="mediaType")

    model_config = ConfigDict(populate_by_name=True)


class AddHistoryRequest(BaseModel):
    """Request body for POST /api/history."""
    movie_id: int = Field(..., alias="movieId", gt=0)
    title: Optional[str] = None
    genre_ids: List[int] = Field(..., alias="genreIds")

    model_config = ConfigDict(populate_by_name=True)


class UpdateNameRequest(BaseModel):
    """Request body for PATCH /api/user/name."""
    name: str

    @field_validator("name")
    @classmethod
    def strip_name(cls, value: str) -> str:
        return value.strip()


class WatchlistMutationResponse(BaseModel):
    """Result of adding to / removing from the watchlist."""
    success: bool
    movie_id: int = Field(..., alias="movieId")
    changed: bool
    message: str

    model_config = ConfigDict(populate_by_name=True)
