"""Notification schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict

from src.lynkskill.schemas.pagination import PaginatedResponse


class NotificationRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    type: str
    title: str
    message: str
    link: str | None
    is_read: bool
    created_at: datetime


NotificationListResponse = PaginatedResponse[NotificationRead]
