"""
Catalog API Router

Trending/popular/top-rated lists with trailers, item details and the
genre taxonomy.
"""

from typing import Any, Dict, List, Optional
from fastapi import APIRouter, Depends, Path, Query, Request
from slowapi import Limiter
from slowapi.util import get_remote_address

from ..config import get_settings
from ..core.logging import get_logger
from ..models.media import LANGUAGE_PATTERN, MediaType
from ..services.catalog_service import CatalogService, get_catalog_service

logger = get_logger(__name__)
settings = get_settings()

router = APIRouter(prefix="/api", tags=["catalog"])
limiter = Limiter(key_func=get_remote_address, enabled=settings.rate_limit_enabled)


@router.get("/trending-picks", response_model=List[Dict[str, Any]])
@limiter.limit(f"{settings.rate_limit_per_minute}/minute")
async def trending_picks(
    request: Request,
    language: str = Query(settings.default_language, pattern=LANGUAGE_PATTERN),
    region: Optional[str] = Query(None),
    original_language: Optional[str] = Query(None, alias="originalLanguage"),
    type: MediaType = Query(MediaType.MOVIE, description="movie or tv"),
    limit: int = Query(6, ge=1, le=20),
    catalog: CatalogService = Depends(get_catalog_service),
):
    """Trending titles (or popular in one original language) with trailer URLs."""
    items = await catalog.trending_picks(
        media_type=type,
        language=language,
        region=region,
        original_language=original_language,
        limit=limit,
    )
    return [item.model_dump(by_alias=True) for item in items]


@router.get("/popular-movies", response_model=List[Dict[str, Any]])
@limiter.limit(f"{settings.rate_limit_per_minute}/minute")
async def popular_movies(
    request: Request,
    language: str = Query(settings.default_language, pattern=LANGUAGE_PATTERN),
    page: int = Query(1, ge=1, le=500),
    limit: int = Query(20, ge=1, le=20),
    catalog: CatalogService = Depends(get_catalog_service),
):
    items = await catalog.movie_list("popular", language=language, page=page, limit=limit)
    return [item.model_dump(by_alias=True) for item in items]


@router.get("/top-rated-movies", response_model=List[Dict[str, Any]])
@limiter.limit(f"{settings.rate_limit_per_minute}/minute")
async def top_rated_movies(
    request: Request,
    language: str = Query(settings.default_language, pattern=LANGUAGE_PATTERN),
    page: int = Query(1, ge=1, le=500),
    limit: int = Query(20, ge=1, le=20),
    catalog: CatalogService = Depends(get_catalog_service),
):
    items = await catalog.movie_list("top_rated", language=language, page=page, limit=limit)
    return [item.model_dump(by_alias=True) for item in items]


@router.get("/details/{media_type}/{tmdb_id}")
async def item_details(
    media_type: MediaType,
    tmdb_id: int = Path(..., gt=0),
    catalog: CatalogService = Depends(get_catalog_service),
):
    """Full TMDB details for one movie or show, plus `trailerKey`."""
    logger.info("details_request", media_type=media_type.value, tmdb_id=tmdb_id)
    return await catalog.details(media_type, tmdb_id)


@router.get("/genres")
async def list_genres(
    language: str = Query(settings.default_language, pattern=LANGUAGE_PATTERN),
    catalog: CatalogService = Depends(get_catalog_service),
):
    """Movie and TV genre lists, for building filter UIs."""
    return await catalog.genres(language)
