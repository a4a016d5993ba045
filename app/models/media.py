"""
Media Item Models

Client-facing shapes for movies and TV shows, normalized from raw
TMDB payloads.
"""

from enum import Enum
from typing import Any, Dict, Optional
from pydantic import BaseModel, Field, ConfigDict

# ISO 639-1 language, optional ISO 3166-1 region: "en", "en-US"
LANGUAGE_PATTERN = r"^[a-z]{2}(-[A-Z]{2})?$"


class MediaType(str, Enum):
    """Media type enum."""
    MOVIE = "movie"
    TV = "tv"


class NormalizedMediaItem(BaseModel):
    """
    Item shape returned to clients.

    Movies carry `title`/`release_date`, TV shows `name`/`first_air_date`;
    both collapse onto the same fields here.
    """
    id: int
    title: Optional[str] = None
    overview: Optional[str] = None
    poster_path: Optional[str] = None
    backdrop_path: Optional[str] = None
    vote_average: Optional[float] = None
    release_date: Optional[str] = None
    media_type: MediaType

    model_config = ConfigDict(populate_by_name=True, use_enum_values=True)

    @classmethod
    def from_tmdb(cls, item: Dict[str, Any], media_type: MediaType) -> "NormalizedMediaItem":
        """Build from a raw TMDB result tagged with its source media type."""
        return cls(
            id=item["id"],
            title=item.get("title") or item.get("name"),
            overview=item.get("overview"),
            poster_path=item.get("poster_path"),
            backdrop_path=item.get("backdrop_path"),
            vote_average=item.get("vote_average"),
            release_date=item.get("release_date") or item.get("first_air_date") or None,
            media_type=media_type,
        )


class EnrichedMediaItem(NormalizedMediaItem):
    """Normalized item plus its YouTube trailer URL (if any)."""
    trailer_url: Optional[str] = Field(None, alias="trailerUrl")
