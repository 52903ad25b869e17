"""User model - the identity boundary's view of an account."""

from datetime import datetime
from uuid import UUID, uuid7

from sqlmodel import Field, SQLModel

from src.lynkskill.models.base import utc_now
from src.lynkskill.models.enums import UserRole


class User(SQLModel, table=True):
    """Account known to the platform.

    ``external_id`` is the identity provider's stable subject; this service
    never sees credentials.
    """

    __tablename__ = "users"

    id: UUID = Field(default_factory=uuid7, primary_key=True)
    external_id: str = Field(max_length=255, unique=True, index=True)
    email: str = Field(max_length=255, unique=True, index=True)
    full_name: str | None = Field(default=None, max_length=100)
    role: str | None = Field(default=None, max_length=20)  # UserRole value
    is_active: bool = Field(default=True)
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    @property
    def display_name(self) -> str:
        return self.full_name or self.email

    @property
    def is_company_type(self) -> bool:
        """Whether the account already belongs on the company side of the platform."""
        return self.role in (UserRole.COMPANY.value, UserRole.TEAM_MEMBER.value)
