"""
Dependencies for portfolio and watchlist API endpoints.
"""

from fastapi import Depends, Request

from ...core.config import Settings, get_settings
from ...database.repositories.user_repository import UserRepository
from ...services.portfolio_service import PortfolioService
from ...services.price_oracle import PriceOracle
from ...services.user_locks import UserLocks
from ...services.watchlist_service import WatchlistService
from .auth import get_user_repository


def get_price_oracle(request: Request) -> PriceOracle:
    """Get the shared spot price client from app state."""
    price_oracle: PriceOracle = request.app.state.price_oracle
    return price_oracle


def get_user_locks(request: Request) -> UserLocks:
    """Get the per-user mutation locks from app state."""
    user_locks: UserLocks = request.app.state.user_locks
    return user_locks


def get_portfolio_service(
    user_repo: UserRepository = Depends(get_user_repository),
    price_oracle: PriceOracle = Depends(get_price_oracle),
    user_locks: UserLocks = Depends(get_user_locks),
    settings: Settings = Depends(get_settings),
) -> PortfolioService:
    """Get portfolio service instance."""
    return PortfolioService(
        user_repo=user_repo,
        price_oracle=price_oracle,
        user_locks=user_locks,
        currency=settings.reference_currency,
        price_timeout=settings.price_timeout_seconds,
    )


def get_watchlist_service(
    user_repo: UserRepository = Depends(get_user_repository),
    user_locks: UserLocks = Depends(get_user_locks),
) -> WatchlistService:
    """Get watchlist service instance."""
    return WatchlistService(user_repo=user_repo, user_locks=user_locks)
