"""Pydantic schemas for tool inputs and responses."""

from pricetracker.schemas.product import (
    PriceHistoryPoint,
    PriceUpdateInput,
    ProductDetailsInput,
    TrackedProductDetailResponse,
    TrackedProductResponse,
)
from pricetracker.schemas.user import UserResponse

__all__ = [
    "PriceHistoryPoint",
    "PriceUpdateInput",
    "ProductDetailsInput",
    "TrackedProductDetailResponse",
    "TrackedProductResponse",
    "UserResponse",
]
