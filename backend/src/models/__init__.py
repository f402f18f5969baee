"""
Pydantic models for MongoDB documents and API payloads.
"""

from .holding import EnrichedHolding, Holding, HoldingCreate, PortfolioSummary
from .user import User, UserCreate
from .watchlist import WatchlistEntry, WatchlistEntryCreate

__all__ = [
    "User",
    "UserCreate",
    "Holding",
    "HoldingCreate",
    "EnrichedHolding",
    "PortfolioSummary",
    "WatchlistEntry",
    "WatchlistEntryCreate",
]
