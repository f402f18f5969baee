"""
Portfolio API endpoints for crypto holdings with live valuation.
"""

from fastapi import APIRouter, Depends, Request

from ..models.holding import HoldingCreate
from ..models.user import User
from ..services.portfolio_service import PortfolioService
from .dependencies.auth import get_current_user
from .dependencies.portfolio_deps import get_portfolio_service
from .dependencies.rate_limit import READ_LIMIT, WRITE_LIMIT, limiter
from .schemas.user_schemas import (
    EnrichedHoldingsResponse,
    HoldingsResponse,
    SummaryResponse,
)

router = APIRouter(prefix="/api/user/portfolio", tags=["portfolio"])


@router.get("", response_model=EnrichedHoldingsResponse)
@limiter.limit(READ_LIMIT)
async def get_portfolio(
    request: Request,
    user: User = Depends(get_current_user),
    portfolio_service: PortfolioService = Depends(get_portfolio_service),
) -> EnrichedHoldingsResponse:
    """
    Get holdings enriched with current price, value and profit/loss.

    Holdings whose price can't be fetched are returned with zeroed
    valuation and priceAvailable=false; the request itself still succeeds.
    """
    enriched = await portfolio_service.list_enriched(user)
    return EnrichedHoldingsResponse(data=enriched)


@router.get("/summary", response_model=SummaryResponse)
@limiter.limit(READ_LIMIT)
async def get_portfolio_summary(
    request: Request,
    user: User = Depends(get_current_user),
    portfolio_service: PortfolioService = Depends(get_portfolio_service),
) -> SummaryResponse:
    """Get total cost, value and profit/loss over all holdings."""
    enriched = await portfolio_service.list_enriched(user)
    return SummaryResponse(data=portfolio_service.summarize(enriched))


@router.post("", response_model=HoldingsResponse)
@limiter.limit(WRITE_LIMIT)
async def add_holding(
    request: Request,
    holding: HoldingCreate,
    user: User = Depends(get_current_user),
    portfolio_service: PortfolioService = Depends(get_portfolio_service),
) -> HoldingsResponse:
    """
    Add a holding at the current spot price.

    Raises:
        InvalidInputError: 400 if cryptoId is missing or amount is not positive
    """
    portfolio = await portfolio_service.add_holding(
        user, holding.crypto_id, holding.amount
    )
    return HoldingsResponse(data=portfolio, message="Added to portfolio")


@router.delete("/{crypto_id}", response_model=HoldingsResponse)
@limiter.limit(WRITE_LIMIT)
async def remove_holding(
    request: Request,
    crypto_id: str,
    user: User = Depends(get_current_user),
    portfolio_service: PortfolioService = Depends(get_portfolio_service),
) -> HoldingsResponse:
    """Remove every lot of an asset. Removing an absent asset succeeds."""
    portfolio = await portfolio_service.remove_holding(user, crypto_id)
    return HoldingsResponse(data=portfolio, message="Removed from portfolio")
