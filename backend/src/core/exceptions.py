"""
Custom exception hierarchy for error categorization and HTTP status mapping.

Distinguishes:
- User errors (400-level): client sent bad data or bad credentials
- Server errors (500-level): our infrastructure/code failed
- External errors (503): the price service failed

Usage:
    from src.core.exceptions import DuplicateEntryError, PriceUnavailableError

    raise DuplicateEntryError("Crypto already in watchlist", crypto_id="bitcoin")

    # Absorbed by the portfolio service, never surfaced to the client
    raise PriceUnavailableError("CoinGecko timeout", asset_id="bitcoin")
"""

from typing import Any


class AppError(Exception):
    """
    Base application error with HTTP status mapping.

    All custom exceptions inherit from this to enable consistent error handling.
    """

    status_code: int = 500
    error_type: str = "internal_error"

    def __init__(self, message: str, **context: Any):
        """
        Initialize error with message and optional context.

        Args:
            message: Human-readable error description
            **context: Additional key-value pairs for logging (e.g., user_id, crypto_id)
        """
        super().__init__(message)
        self.message = message
        self.context = context

    def to_dict(self) -> dict[str, Any]:
        """Convert to dict for structured logging."""
        return {
            "error_type": self.error_type,
            "message": self.message,
            "status_code": self.status_code,
            **self.context,
        }


# ===== 400-level: Client Errors =====


class ValidationError(AppError):
    """User provided invalid input (e.g., missing fields)."""

    status_code = 400
    error_type = "validation_error"


class InvalidInputError(ValidationError):
    """Request data is missing or malformed (e.g., no cryptoId, amount <= 0)."""

    error_type = "invalid_input"


class ConflictError(AppError):
    """Uniqueness constraint violated."""

    status_code = 400
    error_type = "conflict_error"


class DuplicateIdentityError(ConflictError):
    """A user with this email already exists."""

    error_type = "duplicate_identity"


class DuplicateEntryError(ConflictError):
    """The asset is already present in the user's watchlist."""

    error_type = "duplicate_entry"


class AuthenticationError(AppError):
    """Authentication failed (e.g., invalid credentials, expired token)."""

    status_code = 401
    error_type = "authentication_error"


class UnauthorizedError(AuthenticationError):
    """Request carries no usable identity."""

    error_type = "unauthorized"


class InvalidTokenError(AuthenticationError):
    """Token signature or structure is invalid."""

    error_type = "invalid_token"


class TokenExpiredError(AuthenticationError):
    """Token is past its expiry instant."""

    error_type = "token_expired"


# ===== 500-level: Server Errors =====


class DatabaseError(AppError):
    """
    Database operation failed (connection, query, schema issues).

    Maps to 500 Internal Server Error (our infrastructure problem).
    """

    status_code = 500
    error_type = "database_error"


class ConfigurationError(AppError):
    """
    Application misconfigured (e.g., missing env vars, invalid settings).

    Should be caught during startup, not during request handling.
    """

    status_code = 500
    error_type = "configuration_error"


# ===== 503: External Service Errors =====


class ExternalServiceError(AppError):
    """
    External service unavailable or returned error.

    Maps to 503 Service Unavailable (third-party problem, retry may help).
    """

    status_code = 503
    error_type = "external_service_error"

    def __init__(self, message: str, service: str, **context: Any):
        """
        Initialize with service name for easier debugging.

        Args:
            message: Error description
            service: Service identifier (e.g., "coingecko")
            **context: Additional context (e.g., asset_id)
        """
        super().__init__(message, service=service, **context)


class PriceUnavailableError(ExternalServiceError):
    """
    Spot price could not be obtained for an asset.

    Raised on timeout, transport failure, upstream error status, or when the
    asset is missing from the response. Callers convert it into a zero price.
    """

    error_type = "price_unavailable"

    def __init__(self, message: str, service: str = "coingecko", **context: Any):
        super().__init__(message, service=service, **context)
