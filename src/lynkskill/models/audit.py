"""Audit log model for tracking company-scoped team actions."""

from datetime import datetime
from enum import Enum
from typing import Any
from uuid import UUID, uuid7

from sqlalchemy import Column, Index
from sqlalchemy.dialects.postgresql import JSONB
from sqlmodel import Field, SQLModel

from src.lynkskill.models.base import utc_now


class AuditAction(str, Enum):
    """Audit action types for type-safe logging."""

    # Invitations
    INVITATION_CREATE = "invitation.create"
    INVITATION_ACCEPT = "invitation.accept"
    INVITATION_DECLINE = "invitation.decline"
    INVITATION_RESEND = "invitation.resend"
    INVITATION_CANCEL = "invitation.cancel"

    # Company code
    CODE_REGENERATE = "code.regenerate"
    CODE_SETTINGS_UPDATE = "code.settings_update"
    CODE_JOIN = "code.join"

    # Membership
    MEMBER_ROLE_CHANGE = "member.role_change"
    MEMBER_PERMISSIONS_UPDATE = "member.permissions_update"
    MEMBER_REMOVE = "member.remove"
    OWNERSHIP_TRANSFER = "ownership.transfer"

    # Custom roles
    CUSTOM_ROLE_CREATE = "custom_role.create"
    CUSTOM_ROLE_UPDATE = "custom_role.update"
    CUSTOM_ROLE_DELETE = "custom_role.delete"


class AuditStatus(str, Enum):
    """Audit log status."""

    SUCCESS = "success"
    FAILURE = "failure"


class AuditLog(SQLModel, table=True):
    """Append-only record of a team management action within a company."""

    __tablename__ = "audit_logs"
    __table_args__ = (
        Index("ix_audit_logs_company_created", "company_id", "created_at"),
        Index("ix_audit_logs_user_created", "user_id", "created_at"),
        Index("ix_audit_logs_entity", "entity_type", "entity_id"),
    )

    id: UUID = Field(default_factory=uuid7, primary_key=True)

    # Context
    company_id: UUID = Field(foreign_key="companies.id", index=True)
    user_id: UUID | None = Field(foreign_key="users.id", index=True, default=None)

    # Action details
    action: str = Field(max_length=50)  # AuditAction value
    entity_type: str = Field(max_length=50)  # "member", "invitation", "company", "custom_role"
    entity_id: UUID | None = Field(default=None)

    changes: dict[str, Any] | None = Field(
        default=None,
        sa_column=Column(JSONB, nullable=True),
    )

    # Request metadata
    ip_address: str | None = Field(max_length=45, default=None)
    user_agent: str | None = Field(max_length=500, default=None)
    request_id: str | None = Field(max_length=36, default=None)

    status: str = Field(default=AuditStatus.SUCCESS.value, max_length=20)
    error_message: str | None = Field(max_length=1000, default=None)

    created_at: datetime = Field(default_factory=utc_now)
