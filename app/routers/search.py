"""
Search API Router

Unified text / genre search over TMDB.
"""

from typing import Optional
from fastapi import APIRouter, Depends, Query, Request
from slowapi import Limiter
from slowapi.util import get_remote_address

from ..config import get_settings
from ..models.media import LANGUAGE_PATTERN
from ..models.response import SearchResponse
from ..services.search_service import SearchAggregator, get_search_aggregator

settings = get_settings()

router = APIRouter(prefix="/api", tags=["search"])
limiter = Limiter(key_func=get_remote_address, enabled=settings.rate_limit_enabled)


@router.get("/search", response_model=SearchResponse)
@limiter.limit(f"{settings.rate_limit_per_minute}/minute")
async def search_content(
    request: Request,
    query: Optional[str] = Query(None, description="Free-text query"),
    movie_genres: Optional[str] = Query(None, alias="movieGenres", description="Movie genre IDs or names, comma-separated"),
    tv_genres: Optional[str] = Query(None, alias="tvGenres", description="TV genre IDs or names, comma-separated"),
    genres: Optional[str] = Query(None, description="Legacy filter applied to both media types"),
    language: str = Query(settings.default_language, pattern=LANGUAGE_PATTERN),
    page: int = Query(1, ge=1, le=500),
    aggregator: SearchAggregator = Depends(get_search_aggregator),
):
    """
    Search movies and TV shows.

    Any genre filter switches to discover mode (movie and TV merged,
    newest first); otherwise `query` is required.
    """
    return await aggregator.search(
        query=query,
        movie_genres=movie_genres,
        tv_genres=tv_genres,
        genres=genres,
        language=language,
        page=page,
    )
