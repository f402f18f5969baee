"""
Portfolio service for holdings management with live pricing.

Coordinates between the user repository and the spot price client.
Price failures are absorbed per holding and never fail a listing or an add.
"""

import asyncio
import math
from typing import Any

import structlog

from ..core.exceptions import InvalidInputError, PriceUnavailableError
from ..database.repositories.user_repository import UserRepository
from ..models.holding import EnrichedHolding, Holding, PortfolioSummary
from ..models.user import User
from .price_oracle import PriceOracle
from .user_locks import UserLocks, load_for_update

logger = structlog.get_logger()


def _parse_amount(amount: Any) -> float:
    """Accept numbers and numeric strings; reject anything not positive and finite."""
    if amount is None or isinstance(amount, bool):
        raise InvalidInputError("Crypto ID and amount are required")
    try:
        value = float(amount)
    except (TypeError, ValueError) as e:
        raise InvalidInputError("Amount must be a number", amount=str(amount)) from e
    if not math.isfinite(value) or value <= 0:
        raise InvalidInputError("Amount must be a positive number", amount=value)
    return value


class PortfolioService:
    """Service for portfolio management with live pricing."""

    def __init__(
        self,
        user_repo: UserRepository,
        price_oracle: PriceOracle,
        user_locks: UserLocks,
        currency: str = "usd",
        price_timeout: float = 10.0,
    ):
        """
        Initialize portfolio service.

        Args:
            user_repo: Repository for user persistence
            price_oracle: Spot price source
            user_locks: Per-user mutation locks
            currency: Reference currency for all prices
            price_timeout: Upper bound in seconds for one price query
        """
        self.user_repo = user_repo
        self.price_oracle = price_oracle
        self.user_locks = user_locks
        self.currency = currency
        self.price_timeout = price_timeout

    async def _quote(self, crypto_id: str) -> float | None:
        """Spot price for one asset, or None when it can't be obtained."""
        try:
            return await asyncio.wait_for(
                self.price_oracle.get_spot_price(crypto_id, self.currency),
                timeout=self.price_timeout,
            )
        except (PriceUnavailableError, TimeoutError) as e:
            logger.warning(
                "Price unavailable - using zero fallback",
                crypto_id=crypto_id,
                error=str(e),
                error_type=type(e).__name__,
            )
            return None

    def list_holdings(self, user: User) -> list[Holding]:
        """Stored holdings in insertion order, without pricing."""
        return list(user.portfolio)

    async def list_enriched(self, user: User) -> list[EnrichedHolding]:
        """
        Get holdings with current price, value and profit/loss.

        One price query per distinct asset, dispatched concurrently. A failed
        query zeroes only the holdings of that asset. Nothing is persisted.

        Args:
            user: Authenticated user

        Returns:
            Enriched holdings in stored order
        """
        holdings = self.list_holdings(user)
        crypto_ids = list(dict.fromkeys(h.crypto_id for h in holdings))

        quotes = await asyncio.gather(*(self._quote(c) for c in crypto_ids))
        prices = dict(zip(crypto_ids, quotes))

        enriched = [EnrichedHolding.from_holding(h, prices[h.crypto_id]) for h in holdings]

        logger.info(
            "Portfolio enriched",
            user_id=user.user_id,
            holdings=len(enriched),
            unpriced=sum(1 for e in enriched if not e.price_available),
        )

        return enriched

    async def add_holding(
        self, user: User, crypto_id: str | None, amount: Any
    ) -> list[Holding]:
        """
        Add a new lot at the current spot price.

        Adding an asset already held creates a separate lot. If the price
        query fails the lot is recorded with purchase price 0.

        Args:
            user: Authenticated user
            crypto_id: Asset identifier
            amount: Quantity (number or numeric string, > 0)

        Returns:
            Updated portfolio

        Raises:
            InvalidInputError: If crypto_id is missing or amount is not positive
        """
        if not crypto_id or not crypto_id.strip():
            raise InvalidInputError("Crypto ID and amount are required")
        quantity = _parse_amount(amount)

        purchase_price = await self._quote(crypto_id)
        if purchase_price is None:
            purchase_price = 0.0

        async with self.user_locks.lock(user.user_id):
            current = await load_for_update(self.user_repo, user)
            current.portfolio.append(
                Holding(
                    crypto_id=crypto_id,
                    amount=quantity,
                    purchase_price=purchase_price,
                )
            )
            await self.user_repo.save(current)

        logger.info(
            "Holding added",
            user_id=user.user_id,
            crypto_id=crypto_id,
            amount=quantity,
            purchase_price=purchase_price,
        )

        return current.portfolio

    async def remove_holding(self, user: User, crypto_id: str) -> list[Holding]:
        """
        Remove every lot of an asset.

        Removing an asset that isn't held is a no-op.

        Args:
            user: Authenticated user
            crypto_id: Asset identifier

        Returns:
            Updated portfolio
        """
        async with self.user_locks.lock(user.user_id):
            current = await load_for_update(self.user_repo, user)
            remaining = [h for h in current.portfolio if h.crypto_id != crypto_id]
            removed = len(current.portfolio) - len(remaining)

            if removed:
                current.portfolio = remaining
                await self.user_repo.save(current)

        logger.info(
            "Holdings removed",
            user_id=user.user_id,
            crypto_id=crypto_id,
            removed=removed,
        )

        return current.portfolio

    @staticmethod
    def summarize(enriched: list[EnrichedHolding]) -> PortfolioSummary:
        """
        Aggregate an enriched listing.

        Unpriced holdings contribute their cost but zero value and zero
        profit/loss, matching their enriched fallback.
        """
        return PortfolioSummary(
            holdings_count=len(enriched),
            total_cost=sum(h.cost_basis for h in enriched),
            total_value=sum(h.current_value for h in enriched),
            total_profit_loss=sum(h.profit_loss for h in enriched),
            unpriced_count=sum(1 for h in enriched if not h.price_available),
        )
