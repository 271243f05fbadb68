"""User model owning tracked products."""

from typing import TYPE_CHECKING, List

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from pricetracker.models.base import Base, TimestampMixin, UUIDPrimaryKeyMixin

if TYPE_CHECKING:
    from pricetracker.models.product import Product


class User(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """Agent-host user identified by an external user id."""

    __tablename__ = "users"

    user_id: Mapped[str] = mapped_column(
        String(200), unique=True, nullable=False, index=True,
        comment="External user identifier supplied by the agent host"
    )

    # Relationships
    products: Mapped[List["Product"]] = relationship(
        back_populates="user", cascade="all, delete-orphan"
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, user_id='{self.user_id}')>"
