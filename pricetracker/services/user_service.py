"""User service."""

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from pricetracker.models.user import User

logger = structlog.get_logger(__name__)


class UserService:
    """Creates users on first contact; idempotent afterwards."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create_or_update_user(self, user_id: str) -> User:
        result = await self.db.execute(select(User).where(User.user_id == user_id))
        user = result.scalar_one_or_none()
        if user is not None:
            return user

        user = User(user_id=user_id)
        self.db.add(user)
        await self.db.flush()

        logger.info("user_created", user_id=user_id)
        return user
