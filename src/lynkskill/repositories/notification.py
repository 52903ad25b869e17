"""Repository for Notification entity."""

from uuid import UUID

from sqlmodel import select

from src.lynkskill.models.notification import Notification
from src.lynkskill.repositories.base import BaseRepository


class NotificationRepository(BaseRepository[Notification]):
    model = Notification

    async def list_by_user(
        self,
        user_id: UUID,
        cursor: str | None = None,
        limit: int = 50,
        unread_only: bool = False,
    ) -> tuple[list[Notification], str | None, bool]:
        query = select(Notification).where(Notification.user_id == user_id)
        if unread_only:
            query = query.where(Notification.is_read == False)  # noqa: E712
        return await self.paginate(query, cursor, limit, Notification.created_at)
