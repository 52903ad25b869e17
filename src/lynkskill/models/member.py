"""Company membership model."""

from datetime import datetime
from uuid import UUID, uuid7

from sqlalchemy import Column, Index, text
from sqlalchemy.dialects.postgresql import JSONB
from sqlmodel import Field, SQLModel

from src.lynkskill.models.base import utc_now
from src.lynkskill.models.enums import MemberStatus


class CompanyMember(SQLModel, table=True):
    """One user's association with one company.

    The base role is either ``default_role`` or ``custom_role_id``, never both.
    A user has at most one ACTIVE membership across all companies.
    """

    __tablename__ = "company_members"
    __table_args__ = (
        Index(
            "uq_company_members_active_user",
            "user_id",
            unique=True,
            postgresql_where=text("status = 'ACTIVE'"),
        ),
        Index("ix_company_members_company_status", "company_id", "status"),
    )

    id: UUID = Field(default_factory=uuid7, primary_key=True)
    user_id: UUID = Field(foreign_key="users.id", index=True)
    company_id: UUID = Field(foreign_key="companies.id", index=True)

    default_role: str | None = Field(default=None, max_length=20)  # DefaultRole value
    custom_role_id: UUID | None = Field(
        default=None, foreign_key="company_custom_roles.id", index=True
    )
    extra_permissions: list[str] = Field(
        default_factory=list,
        sa_column=Column(JSONB, nullable=False, server_default="[]"),
    )

    status: str = Field(default=MemberStatus.ACTIVE.value, max_length=20)
    invited_by_user_id: UUID | None = Field(default=None, foreign_key="users.id")
    invited_by_email: str | None = Field(default=None, max_length=255)
    joined_via_code: bool = Field(default=False)

    invited_at: datetime | None = Field(default=None)
    joined_at: datetime | None = Field(default=None)
    removed_at: datetime | None = Field(default=None)
    created_at: datetime = Field(default_factory=utc_now)

    @property
    def is_active(self) -> bool:
        return self.status == MemberStatus.ACTIVE.value
