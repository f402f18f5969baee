"""
Per-user serialisation of read-modify-write mutations.

Watchlist and portfolio live embedded in the user document and are saved as a
whole, so two concurrent mutations for the same user would otherwise lose one
write. Mutations take the user's lock, re-read the document, apply the change
and save. This only serialises requests handled by one process; separate
workers can still race (last write wins).
"""

import asyncio
import weakref

from ..core.exceptions import UnauthorizedError
from ..database.repositories.user_repository import UserRepository
from ..models.user import User


class UserLocks:
    """Registry of asyncio locks keyed by user ID."""

    def __init__(self) -> None:
        # Entries disappear once no coroutine holds or awaits the lock
        self._locks: weakref.WeakValueDictionary[str, asyncio.Lock] = (
            weakref.WeakValueDictionary()
        )

    def lock(self, user_id: str) -> asyncio.Lock:
        """Get (or create) the lock for a user."""
        lock = self._locks.get(user_id)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[user_id] = lock
        return lock


async def load_for_update(user_repo: UserRepository, user: User) -> User:
    """
    Re-read a user's document while holding its lock.

    Raises:
        UnauthorizedError: If the user no longer exists
    """
    current = await user_repo.get_by_id(user.user_id)
    if current is None:
        raise UnauthorizedError("User not found", user_id=user.user_id)
    return current
