"""Services module for persistence of users, tracked products and prices.

Services take an AsyncSession and flush; committing is left to the caller.
"""

from pricetracker.services.product_service import ProductService
from pricetracker.services.user_service import UserService

__all__ = [
    "ProductService",
    "UserService",
]
