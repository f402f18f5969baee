"""
Pytest configuration and shared fixtures.

Runs the application in the test environment so rate limits are not
enforced across the shared in-memory limiter.
"""

import asyncio
import os

os.environ.setdefault("ENVIRONMENT", "test")

import pytest  # noqa: E402

from src.core.exceptions import DuplicateIdentityError  # noqa: E402
from src.models.user import User, UserCreate  # noqa: E402
from src.services.password import hash_password  # noqa: E402


class InMemoryUserRepository:
    """Stores copies of users, like a document store would."""

    def __init__(self):
        self.users: dict[str, User] = {}
        self.save_count = 0

    async def create(self, user_create: UserCreate) -> User:
        if await self.get_by_email(user_create.email):
            raise DuplicateIdentityError("User already exists")
        user = User(
            user_id=f"user_{len(self.users):012x}",
            name=user_create.name,
            email=user_create.email,
            password_hash=hash_password(user_create.password, rounds=4),
        )
        self.users[user.user_id] = user.model_copy(deep=True)
        return user

    async def get_by_email(self, email: str) -> User | None:
        for user in self.users.values():
            if user.email == email:
                return user.model_copy(deep=True)
        return None

    async def get_by_id(self, user_id: str) -> User | None:
        await asyncio.sleep(0)  # Yield so concurrent mutations interleave
        user = self.users.get(user_id)
        return user.model_copy(deep=True) if user else None

    async def save(self, user: User) -> User:
        await asyncio.sleep(0)
        self.users[user.user_id] = user.model_copy(deep=True)
        self.save_count += 1
        return user


@pytest.fixture
def sample_user():
    """User with empty watchlist and portfolio"""
    return User(
        user_id="user_abc123def456",
        name="Ada Lovelace",
        email="ada@example.com",
        password_hash="$2b$04$hashed_password_here",
    )


@pytest.fixture
def user_repo(sample_user):
    """In-memory repository seeded with sample_user"""
    repo = InMemoryUserRepository()
    repo.users[sample_user.user_id] = sample_user.model_copy(deep=True)
    return repo
