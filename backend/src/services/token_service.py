"""
Token service for JWT bearer tokens.

Issues signed, time-limited tokens that bind a user ID, and verifies them.
"""

from datetime import timedelta

import structlog
from jose import ExpiredSignatureError, JWTError, jwt

from src.core.utils.date_utils import utcnow

from ..core.config import Settings
from ..core.exceptions import ConfigurationError, InvalidTokenError, TokenExpiredError

logger = structlog.get_logger()

# Development-only fallback; tokens signed with it are forgeable by anyone
# who has read this file.
DEFAULT_SECRET_KEY = "dev-secret-key-change-in-production"


def resolve_secret_key(settings: Settings) -> str:
    """
    Pick the signing key from configuration.

    Fails closed in production (or when REQUIRE_SECRET_KEY is set); other
    environments fall back to DEFAULT_SECRET_KEY with a warning.

    Args:
        settings: Application settings

    Returns:
        Signing key

    Raises:
        ConfigurationError: If no key is configured and one is required
    """
    if settings.secret_key:
        return settings.secret_key

    if settings.is_production or settings.require_secret_key:
        raise ConfigurationError(
            "SECRET_KEY is not configured; refusing to sign tokens with a default key",
            environment=settings.environment,
        )

    logger.warning(
        "SECRET_KEY not configured - using insecure development signing key",
        environment=settings.environment,
    )
    return DEFAULT_SECRET_KEY


class TokenService:
    """Service for issuing and verifying JWT access tokens."""

    ALGORITHM = "HS256"
    TOKEN_EXPIRE_DAYS = 7

    def __init__(self, secret_key: str, expire_days: int = TOKEN_EXPIRE_DAYS):
        """
        Initialize token service.

        Args:
            secret_key: HMAC signing key
            expire_days: Token lifetime in days
        """
        self.secret_key = secret_key
        self.expire_days = expire_days

    def issue(self, user_id: str) -> str:
        """
        Create a signed token for a user.

        Args:
            user_id: User to bind into the token

        Returns:
            JWT string expiring expire_days from now
        """
        now = utcnow()
        payload = {
            "sub": user_id,  # Subject (user ID)
            "iat": now,
            "exp": now + timedelta(days=self.expire_days),
        }

        token: str = jwt.encode(payload, self.secret_key, algorithm=self.ALGORITHM)
        return token

    def verify(self, token: str) -> str:
        """
        Verify a token and extract its user ID.

        Args:
            token: JWT string

        Returns:
            User ID bound in the token

        Raises:
            TokenExpiredError: If the token is past its expiry
            InvalidTokenError: If signature, structure or subject is invalid
        """
        try:
            payload = jwt.decode(token, self.secret_key, algorithms=[self.ALGORITHM])
        except ExpiredSignatureError as e:
            raise TokenExpiredError("Token has expired") from e
        except JWTError as e:
            logger.debug("Token verification failed", error=str(e))
            raise InvalidTokenError("Invalid token") from e

        user_id = payload.get("sub")
        if not user_id or not isinstance(user_id, str):
            raise InvalidTokenError("Token missing subject")

        return user_id
