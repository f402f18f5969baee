"""
User profile endpoint.
"""

from fastapi import APIRouter, Depends, Request

from ..models.user import User
from .dependencies.auth import get_current_user
from .dependencies.rate_limit import READ_LIMIT, limiter
from .schemas.user_schemas import ProfileResponse, UserProfile

router = APIRouter(prefix="/api/user", tags=["user"])


@router.get("/profile", response_model=ProfileResponse)
@limiter.limit(READ_LIMIT)
async def get_profile(
    request: Request,
    user: User = Depends(get_current_user),
) -> ProfileResponse:
    """Get the authenticated user's profile (credentials excluded)."""
    return ProfileResponse(data=UserProfile.from_user(user))
