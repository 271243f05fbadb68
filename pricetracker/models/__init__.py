"""SQLAlchemy models for PriceTracker.

All models are imported here so metadata.create_all sees every table.
"""

from pricetracker.models.base import Base, TimestampMixin, UUIDPrimaryKeyMixin
from pricetracker.models.user import User
from pricetracker.models.product import Product
from pricetracker.models.price import Price

__all__ = [
    "Base",
    "TimestampMixin",
    "UUIDPrimaryKeyMixin",
    "User",
    "Product",
    "Price",
]
