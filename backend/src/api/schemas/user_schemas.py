"""
User-scoped API response schemas (profile, watchlist, portfolio).

Responses wrap their payload in ``data``; mutations add a ``message``.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from ...models.holding import EnrichedHolding, Holding, PortfolioSummary
from ...models.user import User
from ...models.watchlist import WatchlistEntry


class UserProfile(BaseModel):
    """Public view of a user (no credentials, no collections)."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str
    name: str
    email: str
    created_at: datetime

    @classmethod
    def from_user(cls, user: User) -> "UserProfile":
        return cls(
            id=user.user_id,
            name=user.name,
            email=user.email,
            created_at=user.created_at,
        )


class ProfileResponse(BaseModel):
    data: UserProfile


class WatchlistResponse(BaseModel):
    data: list[WatchlistEntry]
    message: str | None = None


class HoldingsResponse(BaseModel):
    """Raw holdings, returned after a portfolio mutation."""

    data: list[Holding]
    message: str | None = None


class EnrichedHoldingsResponse(BaseModel):
    data: list[EnrichedHolding]


class SummaryResponse(BaseModel):
    data: PortfolioSummary
