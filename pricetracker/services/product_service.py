"""Product service for tracked products and their price history.

Handles tracking/untracking products for a user, listing what a user
tracks, and appending price observations.
"""

from decimal import Decimal, InvalidOperation
from typing import Any, Dict, List, Mapping, Optional, Sequence
from urllib.parse import urlparse
from uuid import UUID

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from pricetracker.core.exceptions import NotFoundError
from pricetracker.models.price import Price
from pricetracker.models.product import Product
from pricetracker.models.user import User

logger = structlog.get_logger(__name__)

DEFAULT_PRODUCT_NAME = "New Product"


def _to_amount(value: Any) -> Decimal:
    """Coerce a price value to a 2-place Decimal; missing or bad values are 0."""
    if value is None:
        return Decimal("0.00")
    try:
        return Decimal(str(value)).quantize(Decimal("0.01"))
    except (InvalidOperation, ValueError):
        return Decimal("0.00")


def _parse_uuid(value: str, resource: str) -> UUID:
    try:
        return UUID(str(value))
    except ValueError:
        raise NotFoundError(resource, str(value)) from None


class ProductService:
    """Service for tracked products and price history."""

    def __init__(self, db: AsyncSession):
        """Initialize product service.

        Args:
            db: Async database session
        """
        self.db = db
        self.logger = logger.bind(service="product_service")

    async def _get_user(self, user_id: str) -> User:
        result = await self.db.execute(select(User).where(User.user_id == user_id))
        user = result.scalar_one_or_none()
        if user is None:
            raise NotFoundError("User", user_id)
        return user

    async def track_product(
        self,
        user_id: str,
        url: str,
        product_details: Optional[Mapping[str, Any]] = None,
    ) -> Product:
        """Start tracking a product for a user.

        Records the initial price as the first history entry.

        Args:
            user_id: External user id
            url: Product URL
            product_details: Optional "name", "platform" and "currentPrice"

        Returns:
            Created Product with prices loaded

        Raises:
            NotFoundError: If the user does not exist
        """
        details = product_details or {}
        user = await self._get_user(user_id)

        product = Product(
            name=details.get("name") or DEFAULT_PRODUCT_NAME,
            platform=details.get("platform") or urlparse(url).hostname or "unknown",
            url=url,
            tracking_type="price",
            user_pk=user.id,
        )
        product.prices = [Price(amount=_to_amount(details.get("currentPrice")))]
        self.db.add(product)
        await self.db.flush()

        self.logger.info(
            "product_tracked",
            user_id=user_id,
            product_id=str(product.id),
            platform=product.platform,
        )
        return product

    async def untrack_product(self, user_id: str, product_id: str) -> Product:
        """Stop tracking a product; its price history is deleted with it.

        Raises:
            NotFoundError: If the user does not exist or does not own the product
        """
        user = await self._get_user(user_id)
        pk = _parse_uuid(product_id, "Product")

        result = await self.db.execute(
            select(Product)
            .options(selectinload(Product.prices))
            .where(Product.id == pk, Product.user_pk == user.id)
        )
        product = result.scalar_one_or_none()
        if product is None:
            raise NotFoundError("Product", product_id)

        await self.db.delete(product)
        await self.db.flush()

        self.logger.info("product_untracked", user_id=user_id, product_id=product_id)
        return product

    async def get_user_tracked_products(
        self,
        user_id: str,
        include_price_history: bool = False,
    ) -> List[Product]:
        """All products tracked by a user, oldest first.

        Unknown users simply track nothing.
        """
        query = (
            select(Product)
            .join(User, Product.user_pk == User.id)
            .where(User.user_id == user_id)
            .order_by(Product.created_at.asc())
        )
        if include_price_history:
            query = query.options(selectinload(Product.prices))

        result = await self.db.execute(query)
        products = list(result.scalars().all())

        self.logger.info(
            "tracked_products_fetched",
            user_id=user_id,
            count=len(products),
            include_price_history=include_price_history,
        )
        return products

    async def get_all_tracked_products(self) -> List[Product]:
        """Every tracked product with its price history loaded; prices[-1] is the latest."""
        result = await self.db.execute(
            select(Product)
            .options(selectinload(Product.prices))
            .order_by(Product.created_at.asc())
        )
        return list(result.scalars().all())

    async def get_latest_price(self, product_id: UUID) -> Optional[Price]:
        result = await self.db.execute(
            select(Price)
            .where(Price.product_id == product_id)
            .order_by(Price.created_at.desc(), Price.id.desc())
            .limit(1)
        )
        return result.scalar_one_or_none()

    async def update_all_products(self, updates: Sequence[Mapping[str, Any]]) -> List[Product]:
        """Append a price entry to each product in updates.

        All-or-nothing: an unknown product id raises before anything is
        written, and the caller's transaction is rolled back.

        Args:
            updates: Items with "id" and "currentPrice"

        Returns:
            Updated products with their full price history

        Raises:
            NotFoundError: If any product id does not exist
        """
        ids = [_parse_uuid(item["id"], "Product") for item in updates]

        result = await self.db.execute(
            select(Product).options(selectinload(Product.prices)).where(Product.id.in_(ids))
        )
        products: Dict[UUID, Product] = {p.id: p for p in result.scalars().all()}

        for pk, item in zip(ids, updates):
            if pk not in products:
                raise NotFoundError("Product", str(item["id"]))

        for pk, item in zip(ids, updates):
            products[pk].prices.append(Price(amount=_to_amount(item.get("currentPrice"))))

        await self.db.flush()

        self.logger.info("product_prices_updated", count=len(updates))
        return [products[pk] for pk in ids]
