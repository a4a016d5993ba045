"""
User Profile Router
"""

from fastapi import APIRouter, Depends

from ..core.exceptions import BadRequestError
from ..core.security import get_current_user
from ..models.user_lists import UpdateNameRequest
from ..services.firestore_service import FirestoreService, get_firestore_service

router = APIRouter(prefix="/api/user", tags=["user"])


@router.patch("/name")
async def update_name(
    body: UpdateNameRequest,
    current_user: dict = Depends(get_current_user),
    store: FirestoreService = Depends(get_firestore_service),
):
    """Update the display name stored on the user's profile."""
    if not body.name:
        raise BadRequestError("Name is required")

    user = await store.update_user_name(current_user["uid"], body.name)
    return {"user": user}
