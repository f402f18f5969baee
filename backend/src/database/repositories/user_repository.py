"""
User repository (credential store) for authentication and per-user state.
Handles CRUD operations for the users collection.
"""

import uuid

import structlog
from motor.motor_asyncio import AsyncIOMotorCollection
from pymongo.errors import DuplicateKeyError

from src.core.utils.date_utils import utcnow

from ...core.exceptions import DuplicateIdentityError
from ...models.user import User, UserCreate
from ...services.password import DEFAULT_ROUNDS, hash_password

logger = structlog.get_logger()


class UserRepository:
    """Repository for user data access operations."""

    def __init__(
        self, collection: AsyncIOMotorCollection, bcrypt_rounds: int = DEFAULT_ROUNDS
    ):
        """
        Initialize user repository.

        Args:
            collection: MongoDB collection for users
            bcrypt_rounds: Cost factor used when hashing new passwords
        """
        self.collection = collection
        self.bcrypt_rounds = bcrypt_rounds

    async def ensure_indexes(self) -> None:
        """
        Create indexes for lookups and uniqueness.
        Called during application startup.
        """
        await self.collection.create_index("email", unique=True, name="email_1")
        await self.collection.create_index("user_id", unique=True, name="user_id_1")

        logger.info("User indexes ensured")

    async def create(self, user_create: UserCreate) -> User:
        """
        Create a new user with empty watchlist and portfolio.

        Args:
            user_create: User creation data (plain password is hashed here)

        Returns:
            Created user with generated ID

        Raises:
            DuplicateIdentityError: If the email is already registered
        """
        if await self.get_by_email(user_create.email):
            raise DuplicateIdentityError("User already exists", email=user_create.email)

        user = User(
            user_id=f"user_{uuid.uuid4().hex[:12]}",
            name=user_create.name,
            email=user_create.email,
            password_hash=hash_password(user_create.password, self.bcrypt_rounds),
            created_at=utcnow(),
        )

        try:
            await self.collection.insert_one(user.to_document())
        except DuplicateKeyError as e:
            # Concurrent registration won the unique index race
            raise DuplicateIdentityError(
                "User already exists", email=user_create.email
            ) from e

        logger.info("User created", user_id=user.user_id, email=user.email)

        return user

    async def get_by_id(self, user_id: str) -> User | None:
        """
        Get user by ID.

        Args:
            user_id: User identifier

        Returns:
            User if found, None otherwise
        """
        user_dict = await self.collection.find_one({"user_id": user_id})

        if not user_dict:
            return None

        # Remove MongoDB _id field
        user_dict.pop("_id", None)

        return User(**user_dict)

    async def get_by_email(self, email: str) -> User | None:
        """
        Get user by email address (exact, case-sensitive match).

        Args:
            email: Email address

        Returns:
            User if found, None otherwise
        """
        user_dict = await self.collection.find_one({"email": email})

        if not user_dict:
            return None

        user_dict.pop("_id", None)

        return User(**user_dict)

    async def save(self, user: User) -> User:
        """
        Persist the full user document (upsert keyed on user_id).

        Args:
            user: User with its embedded watchlist and portfolio

        Returns:
            The saved user
        """
        await self.collection.replace_one(
            {"user_id": user.user_id}, user.to_document(), upsert=True
        )

        logger.debug(
            "User saved",
            user_id=user.user_id,
            watchlist_size=len(user.watchlist),
            portfolio_size=len(user.portfolio),
        )

        return user
