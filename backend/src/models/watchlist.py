"""
Watchlist models for tracking crypto assets a user wants to follow.

Entries are embedded in the user document; the asset id is the only key.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from src.core.utils.date_utils import utcnow


class WatchlistEntry(BaseModel):
    """
    Watched asset.

    Unique per user by crypto_id.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "cryptoId": "bitcoin",
                "addedAt": "2025-11-01T10:00:00Z",
            }
        },
    )

    crypto_id: str = Field(..., description="Asset identifier (e.g., bitcoin)")
    added_at: datetime = Field(
        default_factory=utcnow, description="When asset was added to watchlist"
    )


class WatchlistEntryCreate(BaseModel):
    """Request model for adding an asset to the watchlist."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        json_schema_extra={"example": {"cryptoId": "ethereum"}},
    )

    # Optional so the service reports a missing id as invalid input (400)
    crypto_id: str | None = Field(None, description="Asset identifier")
