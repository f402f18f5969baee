"""
Holding models for portfolio management.

A holding is one lot of a crypto asset: amount plus the spot price captured
when it was added. Several lots of the same asset may coexist.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, StrictFloat, StrictInt
from pydantic.alias_generators import to_camel

from src.core.utils.date_utils import utcnow


class Holding(BaseModel):
    """
    Crypto lot in a user's portfolio.

    Stored embedded in the user document, in insertion order.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "cryptoId": "bitcoin",
                "amount": 2.5,
                "purchasePrice": 64250.0,
                "addedAt": "2025-11-01T10:00:00Z",
            }
        },
    )

    crypto_id: str = Field(..., description="Asset identifier (e.g., bitcoin)")
    amount: float = Field(..., gt=0, description="Quantity held")
    purchase_price: float = Field(
        0.0, ge=0, description="Spot price when the lot was added (reference currency)"
    )
    added_at: datetime = Field(default_factory=utcnow)

    @property
    def cost_basis(self) -> float:
        """Amount invested in this lot (amount * purchase_price)."""
        return self.amount * self.purchase_price


class HoldingCreate(BaseModel):
    """Request model for adding a holding."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        json_schema_extra={"example": {"cryptoId": "bitcoin", "amount": 2.5}},
    )

    # Loosely typed: the service validates and reports 400 on bad values
    crypto_id: str | None = Field(None, description="Asset identifier")
    # Strict: a JSON boolean must not coerce to 1.0
    amount: StrictFloat | StrictInt | str | None = Field(
        None, description="Quantity to add (> 0)"
    )


class EnrichedHolding(Holding):
    """
    Holding with live valuation.

    Computed at read time and never persisted. When the price query fails,
    current_price, current_value and profit_loss are all 0 and
    price_available is False.
    """

    current_price: float = Field(0.0, description="Current spot price")
    current_value: float = Field(0.0, description="amount * current_price")
    profit_loss: float = Field(
        0.0, description="current_value - amount * purchase_price"
    )
    price_available: bool = Field(
        False, description="Whether the spot price query succeeded"
    )

    @classmethod
    def from_holding(
        cls, holding: Holding, current_price: float | None
    ) -> "EnrichedHolding":
        """Build enriched view; None means the price is unavailable."""
        if current_price is None:
            return cls(**holding.model_dump(), price_available=False)

        current_value = holding.amount * current_price
        return cls(
            **holding.model_dump(),
            current_price=current_price,
            current_value=current_value,
            profit_loss=current_value - holding.cost_basis,
            price_available=True,
        )


class PortfolioSummary(BaseModel):
    """Aggregated valuation over an enriched portfolio listing."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    holdings_count: int = 0
    total_cost: float = 0.0
    total_value: float = 0.0
    total_profit_loss: float = 0.0
    unpriced_count: int = 0
