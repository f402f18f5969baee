"""
Authentication service: registration, password login and bearer resolution.

resolve_bearer is the single gate every identity-scoped operation passes
through; the User it returns is the owner context for that request.
"""

import structlog

from ..core.exceptions import (
    AuthenticationError,
    InvalidInputError,
    UnauthorizedError,
)
from ..database.repositories.user_repository import UserRepository
from ..models.user import User, UserCreate
from .password import MAX_PASSWORD_BYTES, verify_password
from .token_service import TokenService

logger = structlog.get_logger()


def _require(**fields: str | None) -> None:
    """Raise InvalidInputError naming every blank field."""
    missing = [name for name, value in fields.items() if not value or not value.strip()]
    if missing:
        raise InvalidInputError(
            f"Missing required fields: {', '.join(missing)}", fields=missing
        )


class AuthService:
    """Service for user authentication and identity resolution."""

    def __init__(self, user_repository: UserRepository, token_service: TokenService):
        """
        Initialize auth service.

        Args:
            user_repository: Credential store
            token_service: Token issuer/verifier
        """
        self.user_repo = user_repository
        self.token_service = token_service

    async def register(
        self,
        first_name: str | None,
        last_name: str | None,
        email: str | None,
        password: str | None,
    ) -> tuple[User, str]:
        """
        Register a new user and issue a token.

        Args:
            first_name: Given name
            last_name: Family name
            email: Email address (unique, stored as given)
            password: Plain text password (hashed by the repository)

        Returns:
            Tuple of (User, token)

        Raises:
            InvalidInputError: If any field is missing or password too long
            DuplicateIdentityError: If the email is already registered
        """
        _require(firstName=first_name, lastName=last_name, email=email, password=password)

        if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
            raise InvalidInputError(
                f"Password must be at most {MAX_PASSWORD_BYTES} bytes"
            )

        user = await self.user_repo.create(
            UserCreate(
                name=f"{first_name} {last_name}",
                email=email,
                password=password,
            )
        )

        logger.info("New user registered", user_id=user.user_id)

        return user, self.token_service.issue(user.user_id)

    async def login(self, email: str | None, password: str | None) -> tuple[User, str]:
        """
        Login with email and password.

        Args:
            email: Email address
            password: Plain text password

        Returns:
            Tuple of (User, token)

        Raises:
            InvalidInputError: If email or password is missing
            AuthenticationError: If credentials don't match
        """
        _require(email=email, password=password)

        user = await self.user_repo.get_by_email(email)
        if not user or not verify_password(password, user.password_hash):
            logger.warning("Failed login attempt")
            raise AuthenticationError("Invalid credentials")

        logger.info("User logged in", user_id=user.user_id)

        return user, self.token_service.issue(user.user_id)

    async def resolve_bearer(self, authorization: str | None) -> User:
        """
        Resolve an Authorization header value to the user it identifies.

        Args:
            authorization: Raw header value, expected "Bearer <token>"

        Returns:
            The authenticated user

        Raises:
            UnauthorizedError: If the header is missing/malformed, the token is
                invalid or expired, or the user no longer exists
        """
        if not authorization:
            raise UnauthorizedError("Access token required")

        parts = authorization.split()
        if len(parts) != 2 or parts[0].lower() != "bearer":
            raise UnauthorizedError(
                "Invalid authorization header format. Expected: Bearer <token>"
            )

        try:
            user_id = self.token_service.verify(parts[1])
        except AuthenticationError as e:
            logger.info("Bearer token rejected", reason=e.error_type)
            raise UnauthorizedError(e.message, reason=e.error_type) from e

        user = await self.user_repo.get_by_id(user_id)
        if not user:
            logger.warning("Token subject not found", user_id=user_id)
            raise UnauthorizedError("User not found")

        return user

