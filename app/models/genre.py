"""
Genre Models

Cached TMDB genre taxonomy for one language.
"""

from datetime import datetime, timezone
from typing import Dict, List, Set
from pydantic import BaseModel, Field


class Genre(BaseModel):
    """A single TMDB genre."""
    id: int
    name: str


class GenreCacheEntry(BaseModel):
    """
    Movie and TV genre lookup tables for one language.

    Name keys are normalized (see `normalize_genre_name`) and include
    hand-authored synonyms. Replaced wholesale on expiry.
    """
    language: str
    movie_ids: Set[int] = Field(default_factory=set)
    tv_ids: Set[int] = Field(default_factory=set)
    movie_name_to_id: Dict[str, int] = Field(default_factory=dict)
    tv_name_to_id: Dict[str, int] = Field(default_factory=dict)
    movie_genres: List[Genre] = Field(default_factory=list)
    tv_genres: List[Genre] = Field(default_factory=list)
    expires_at: datetime

    def is_expired(self, now: datetime) -> bool:
        return now >= self.expires_at

    def ttl_seconds(self, now: datetime) -> int:
        """Whole seconds until expiry (never below 1)."""
        return max(1, int((self.expires_at - now).total_seconds()))


def utcnow() -> datetime:
    return datetime.now(timezone.utc)
