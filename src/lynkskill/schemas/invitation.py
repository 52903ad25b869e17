"""Company invitation schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr


class InvitationCreateRequest(BaseModel):
    """Invite by email with a default role (VIEWER when omitted) or a custom role."""

    email: EmailStr
    role: str | None = None
    custom_role_id: UUID | None = None


class InvitationRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    email: str
    role: str
    custom_role_id: UUID | None
    invited_by_user_id: UUID
    created_at: datetime
    expires_at: datetime
    accepted_at: datetime | None


class InvitationCreateResponse(InvitationRead):
    message: str = "Invitation sent successfully"


class InvitationInfoResponse(BaseModel):
    """Public info about an invitation (for the accept page)."""

    email: str
    company_id: UUID
    company_name: str
    company_logo_url: str | None
    role: str | None
    role_label: str
    custom_role_id: UUID | None
    inviter_name: str
    expires_at: datetime


class InvitationAcceptResponse(BaseModel):
    member_id: UUID
    company_id: UUID
    message: str = "Invitation accepted"
