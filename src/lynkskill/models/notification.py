"""In-app notification model."""

from datetime import datetime
from uuid import UUID, uuid7

from sqlmodel import Field, SQLModel

from src.lynkskill.models.base import utc_now


class Notification(SQLModel, table=True):
    __tablename__ = "notifications"

    id: UUID = Field(default_factory=uuid7, primary_key=True)
    user_id: UUID = Field(foreign_key="users.id", index=True)
    type: str = Field(max_length=50)  # NotificationType value
    title: str = Field(max_length=200)
    message: str = Field(max_length=1000)
    link: str | None = Field(default=None, max_length=500)
    is_read: bool = Field(default=False)
    created_at: datetime = Field(default_factory=utc_now)
