"""The caller's in-app notifications."""

from typing import Annotated

from fastapi import APIRouter, Query

from src.lynkskill.api.dependencies import CurrentUser, NotificationServiceDep
from src.lynkskill.schemas.notification import NotificationListResponse, NotificationRead

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.get("", response_model=NotificationListResponse, summary="List my notifications")
async def list_notifications(
    user: CurrentUser,
    notification_service: NotificationServiceDep,
    cursor: Annotated[str | None, Query(description="Pagination cursor")] = None,
    limit: Annotated[int, Query(ge=1, le=100)] = 50,
    unread_only: bool = False,
) -> NotificationListResponse:
    notifications, next_cursor, has_more = await notification_service.list_for_user(
        user.id, cursor=cursor, limit=limit, unread_only=unread_only
    )
    return NotificationListResponse(
        items=[NotificationRead.model_validate(n) for n in notifications],
        next_cursor=next_cursor,
        has_more=has_more,
    )
