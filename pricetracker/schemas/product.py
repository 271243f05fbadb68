"""Product Pydantic schemas for tool inputs and responses."""

from datetime import datetime
from decimal import Decimal
from typing import Any, List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator


class PriceHistoryPoint(BaseModel):
    """Single price history data point."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    amount: float
    created_at: datetime

    @field_validator("amount", mode="before")
    @classmethod
    def decimal_to_float(cls, value: Any) -> Any:
        if isinstance(value, Decimal):
            return float(value)
        return value


class TrackedProductResponse(BaseModel):
    """Tracked product without its price history."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    platform: str
    url: str
    tracking_type: str
    created_at: datetime
    updated_at: datetime


class TrackedProductDetailResponse(TrackedProductResponse):
    """Tracked product with price history, oldest first."""

    prices: List[PriceHistoryPoint] = []


class ProductDetailsInput(BaseModel):
    """Details supplied by the caller when tracking a product."""

    name: Optional[str] = None
    platform: Optional[str] = None
    currentPrice: Optional[float] = None


class PriceUpdateInput(BaseModel):
    """One price observation for a tracked product."""

    id: str = Field(..., description="Tracked product id")
    currentPrice: float = Field(..., ge=0)
