"""
Recommendations API Router

Personalized picks for the authenticated user.
"""

from typing import Any, Dict, List
from fastapi import APIRouter, Depends

from ..core.logging import get_logger
from ..core.security import get_current_user
from ..services.recommendation_service import RecommendationService, get_recommendation_service

logger = get_logger(__name__)

router = APIRouter(prefix="/api", tags=["recommendations"])


@router.get("/recommendations", response_model=List[Dict[str, Any]])
async def get_recommendations(
    current_user: dict = Depends(get_current_user),
    service: RecommendationService = Depends(get_recommendation_service),
):
    """
    Popular movies in the user's most-watched genres.

    Titles already on the watchlist or in the history are never returned.
    Empty when the user has no watchlist or history yet.
    """
    items = await service.recommend(current_user["uid"])
    return [item.model_dump(by_alias=True) for item in items]
