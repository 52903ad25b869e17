"""Company model, including the shared invitation code settings."""

from datetime import datetime
from uuid import UUID, uuid7

from sqlmodel import Field, SQLModel

from src.lynkskill.models.base import utc_now


class Company(SQLModel, table=True):
    """Company registry.

    The invitation code columns hold only the current code and its limits;
    who joined with it is recorded on the memberships.
    """

    __tablename__ = "companies"

    id: UUID = Field(default_factory=uuid7, primary_key=True)
    name: str = Field(max_length=200, index=True)
    owner_id: UUID = Field(foreign_key="users.id", index=True)
    description: str | None = Field(default=None)
    location: str | None = Field(default=None, max_length=200)
    logo_url: str | None = Field(default=None, max_length=500)

    invitation_code: str | None = Field(default=None, max_length=19, unique=True, index=True)
    code_enabled: bool = Field(default=True)
    code_expires_at: datetime | None = Field(default=None)
    max_team_members: int | None = Field(default=None)
    code_usage_count: int = Field(default=0)
    last_code_regen_at: datetime | None = Field(default=None)

    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)
