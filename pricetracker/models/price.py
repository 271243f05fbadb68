"""Append-only price history for tracked products."""

import uuid
from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, ForeignKey, Index, Integer, Numeric
from sqlalchemy.orm import Mapped, mapped_column, relationship

from pricetracker.models.base import Base, utcnow

if TYPE_CHECKING:
    from pricetracker.models.product import Product


class Price(Base):
    """A single observed price for a product.

    Rows are never updated. The integer key breaks ties between rows
    recorded within the same clock tick, so (created_at, id) is the
    insertion order.
    """

    __tablename__ = "prices"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    product_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("products.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, comment="Price at this point in time")

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        nullable=False,
        comment="When this price was recorded"
    )

    __table_args__ = (
        Index("idx_prices_product_created", "product_id", "created_at"),
    )

    # Relationships
    product: Mapped["Product"] = relationship(back_populates="prices")

    def __repr__(self) -> str:
        return f"<Price(id={self.id}, product_id={self.product_id}, amount={self.amount}, created_at={self.created_at})>"
