"""
User models for authentication and per-user collections.
"""

from datetime import datetime

from pydantic import BaseModel, Field

from src.core.utils.date_utils import utcnow

from .holding import Holding
from .watchlist import WatchlistEntry


class UserCreate(BaseModel):
    """Data for creating a new user."""

    name: str = Field(..., description="Display name (first + last)")
    email: str = Field(..., description="Email address (unique)")
    password: str = Field(..., description="Password (will be hashed)")


class User(BaseModel):
    """
    User model for database storage.

    Owns exactly one watchlist and one portfolio, embedded in the document.
    """

    user_id: str = Field(..., description="Unique user identifier")
    name: str = Field(..., description="Display name")
    email: str = Field(..., description="Email address (unique, case-sensitive)")
    password_hash: str = Field(..., description="Bcrypt password hash")
    created_at: datetime = Field(default_factory=utcnow)
    watchlist: list[WatchlistEntry] = Field(default_factory=list)
    portfolio: list[Holding] = Field(default_factory=list)

    def to_document(self) -> dict:
        """Serialize for MongoDB (snake_case keys, embedded arrays)."""
        return self.model_dump(by_alias=False)
