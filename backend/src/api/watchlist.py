"""
Watchlist API endpoints for managing watched crypto assets.
"""

from fastapi import APIRouter, Depends, Request

from ..models.user import User
from ..models.watchlist import WatchlistEntryCreate
from ..services.watchlist_service import WatchlistService
from .dependencies.auth import get_current_user
from .dependencies.portfolio_deps import get_watchlist_service
from .dependencies.rate_limit import READ_LIMIT, WRITE_LIMIT, limiter
from .schemas.user_schemas import WatchlistResponse

router = APIRouter(prefix="/api/user/watchlist", tags=["watchlist"])


@router.get("", response_model=WatchlistResponse, response_model_exclude_none=True)
@limiter.limit(READ_LIMIT)
async def get_watchlist(
    request: Request,
    user: User = Depends(get_current_user),
    watchlist_service: WatchlistService = Depends(get_watchlist_service),
) -> WatchlistResponse:
    """Get the authenticated user's watchlist in insertion order."""
    return WatchlistResponse(data=watchlist_service.list(user))


@router.post("", response_model=WatchlistResponse)
@limiter.limit(WRITE_LIMIT)
async def add_to_watchlist(
    request: Request,
    item: WatchlistEntryCreate,
    user: User = Depends(get_current_user),
    watchlist_service: WatchlistService = Depends(get_watchlist_service),
) -> WatchlistResponse:
    """
    Add an asset to the watchlist.

    Raises:
        InvalidInputError: 400 if cryptoId is missing
        DuplicateEntryError: 400 if the asset is already watched
    """
    watchlist = await watchlist_service.add(user, item.crypto_id)
    return WatchlistResponse(data=watchlist, message="Added to watchlist")


@router.delete("/{crypto_id}", response_model=WatchlistResponse)
@limiter.limit(WRITE_LIMIT)
async def remove_from_watchlist(
    request: Request,
    crypto_id: str,
    user: User = Depends(get_current_user),
    watchlist_service: WatchlistService = Depends(get_watchlist_service),
) -> WatchlistResponse:
    """Remove an asset from the watchlist. Removing an absent asset succeeds."""
    watchlist = await watchlist_service.remove(user, crypto_id)
    return WatchlistResponse(data=watchlist, message="Removed from watchlist")
