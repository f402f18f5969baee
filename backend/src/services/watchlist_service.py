"""
Watchlist service for tracking crypto assets.
"""

from __future__ import annotations

import structlog

from ..core.exceptions import DuplicateEntryError, InvalidInputError
from ..database.repositories.user_repository import UserRepository
from ..models.user import User
from ..models.watchlist import WatchlistEntry
from .user_locks import UserLocks, load_for_update

logger = structlog.get_logger()


class WatchlistService:
    """Service for watchlist mutations on the embedded user document."""

    def __init__(self, user_repo: UserRepository, user_locks: UserLocks):
        self.user_repo = user_repo
        self.user_locks = user_locks

    def list(self, user: User) -> list[WatchlistEntry]:
        """Watchlist entries in insertion order."""
        return list(user.watchlist)

    async def add(self, user: User, crypto_id: str | None) -> list[WatchlistEntry]:
        """
        Add an asset to the watchlist.

        Args:
            user: Authenticated user
            crypto_id: Asset identifier

        Returns:
            Updated watchlist

        Raises:
            InvalidInputError: If crypto_id is missing
            DuplicateEntryError: If the asset is already watched (nothing saved)
        """
        if not crypto_id or not crypto_id.strip():
            raise InvalidInputError("Crypto ID is required")

        async with self.user_locks.lock(user.user_id):
            current = await load_for_update(self.user_repo, user)

            if any(entry.crypto_id == crypto_id for entry in current.watchlist):
                raise DuplicateEntryError(
                    "Crypto already in watchlist", crypto_id=crypto_id
                )

            current.watchlist.append(WatchlistEntry(crypto_id=crypto_id))
            await self.user_repo.save(current)

        logger.info("Watchlist entry added", user_id=user.user_id, crypto_id=crypto_id)

        return current.watchlist

    async def remove(self, user: User, crypto_id: str) -> list[WatchlistEntry]:
        """
        Remove an asset from the watchlist; no-op if it isn't there.

        Args:
            user: Authenticated user
            crypto_id: Asset identifier

        Returns:
            Updated watchlist
        """
        async with self.user_locks.lock(user.user_id):
            current = await load_for_update(self.user_repo, user)
            remaining = [e for e in current.watchlist if e.crypto_id != crypto_id]

            if len(remaining) != len(current.watchlist):
                current.watchlist = remaining
                await self.user_repo.save(current)
                logger.info(
                    "Watchlist entry removed", user_id=user.user_id, crypto_id=crypto_id
                )

        return current.watchlist
