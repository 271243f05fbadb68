"""Tracked product model."""

import uuid
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import ForeignKey, Index, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from pricetracker.models.base import Base, TimestampMixin, UUIDPrimaryKeyMixin

if TYPE_CHECKING:
    from pricetracker.models.price import Price
    from pricetracker.models.user import User


class Product(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """Product a user tracks on an e-commerce platform.

    The owning user is nullable at the schema level; the tracking flow
    always supplies one.
    """

    __tablename__ = "products"

    name: Mapped[str] = mapped_column(String(500), nullable=False, comment="Product display name")
    platform: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    url: Mapped[str] = mapped_column(String(2000), nullable=False, comment="Link to product on shop")
    tracking_type: Mapped[str] = mapped_column(String(20), nullable=False, default="price")

    user_pk: Mapped[Optional[uuid.UUID]] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=True,
        index=True,
    )

    __table_args__ = (
        Index("idx_products_user_platform", "user_pk", "platform"),
    )

    # Relationships
    user: Mapped[Optional["User"]] = relationship(back_populates="products")
    prices: Mapped[List["Price"]] = relationship(
        back_populates="product",
        cascade="all, delete-orphan",
        order_by="[Price.created_at, Price.id]",
    )

    def __repr__(self) -> str:
        return f"<Product(id={self.id}, name='{self.name[:50]}', platform={self.platform})>"
