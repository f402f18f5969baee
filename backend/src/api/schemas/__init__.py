"""API request/response schemas."""

from .auth_schemas import AuthResponse, LoginRequest, RegisterRequest
from .user_schemas import (
    EnrichedHoldingsResponse,
    HoldingsResponse,
    ProfileResponse,
    SummaryResponse,
    UserProfile,
    WatchlistResponse,
)

__all__ = [
    "AuthResponse",
    "EnrichedHoldingsResponse",
    "HoldingsResponse",
    "LoginRequest",
    "ProfileResponse",
    "RegisterRequest",
    "SummaryResponse",
    "UserProfile",
    "WatchlistResponse",
]
