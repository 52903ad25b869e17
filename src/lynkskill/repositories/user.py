"""Repository for User entity."""

from uuid import UUID

from sqlalchemy import func
from sqlmodel import col, select

from src.lynkskill.models.user import User
from src.lynkskill.repositories.base import BaseRepository


class UserRepository(BaseRepository[User]):
    model = User

    async def get_by_external_id(self, external_id: str) -> User | None:
        """Get user by identity provider subject."""
        result = await self.session.execute(select(User).where(User.external_id == external_id))
        return result.scalar_one_or_none()

    async def get_by_email(self, email: str) -> User | None:
        """Get user by email address (case-insensitive)."""
        result = await self.session.execute(
            select(User).where(func.lower(User.email) == email.lower())
        )
        return result.scalar_one_or_none()

    async def get_by_ids(self, ids: list[UUID]) -> dict[UUID, User]:
        """Load several users at once, keyed by id."""
        if not ids:
            return {}
        result = await self.session.execute(select(User).where(col(User.id).in_(ids)))
        return {user.id: user for user in result.scalars().all()}
