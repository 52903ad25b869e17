"""Company invitation model."""

from datetime import datetime
from uuid import UUID, uuid7

from sqlmodel import Field, SQLModel

from src.lynkskill.models.base import utc_now
from src.lynkskill.models.enums import DefaultRole


class CompanyInvitation(SQLModel, table=True):
    """Single-use, email-bound, time-boxed offer to join a company.

    Only the SHA-256 hash of the token is stored. Declined and cancelled
    invitations are deleted; accepted ones keep ``accepted_at`` forever.
    """

    __tablename__ = "company_invitations"

    id: UUID = Field(default_factory=uuid7, primary_key=True)
    company_id: UUID = Field(foreign_key="companies.id", index=True)
    email: str = Field(max_length=255, index=True)
    token_hash: str = Field(max_length=255, unique=True, index=True)
    role: str = Field(default=DefaultRole.VIEWER.value, max_length=20)
    custom_role_id: UUID | None = Field(
        default=None, foreign_key="company_custom_roles.id", index=True
    )
    invited_by_user_id: UUID = Field(foreign_key="users.id", index=True)
    expires_at: datetime
    created_at: datetime = Field(default_factory=utc_now)
    accepted_at: datetime | None = Field(default=None)

    def is_expired(self, now: datetime | None = None) -> bool:
        return self.expires_at < (now or utc_now())

    @property
    def is_accepted(self) -> bool:
        return self.accepted_at is not None
