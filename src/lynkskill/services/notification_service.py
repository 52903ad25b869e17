"""In-app notification dispatch.

Notifications are a best-effort side effect: they are created after the
business transaction commits and a failure here is logged, never raised.
"""

import contextlib
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from src.lynkskill.core.logging import get_logger
from src.lynkskill.models.enums import NotificationType
from src.lynkskill.models.notification import Notification
from src.lynkskill.repositories.notification import NotificationRepository

logger = get_logger(__name__)


class NotificationService:
    def __init__(self, notification_repo: NotificationRepository, session: AsyncSession):
        self.notification_repo = notification_repo
        self.session = session

    async def notify(
        self,
        user_id: UUID,
        type: NotificationType,
        title: str,
        message: str,
        link: str | None = None,
    ) -> Notification | None:
        try:
            notification = Notification(
                user_id=user_id,
                type=type.value,
                title=title,
                message=message[:1000],
                link=link,
            )
            self.notification_repo.add(notification)
            await self.session.commit()
            return notification
        except Exception as e:
            logger.error(
                "Failed to create notification",
                user_id=str(user_id),
                notification_type=type.value,
                error=str(e),
            )
            with contextlib.suppress(Exception):
                await self.session.rollback()
            return None

    async def list_for_user(
        self,
        user_id: UUID,
        cursor: str | None = None,
        limit: int = 50,
        unread_only: bool = False,
    ) -> tuple[list[Notification], str | None, bool]:
        return await self.notification_repo.list_by_user(user_id, cursor, limit, unread_only)
