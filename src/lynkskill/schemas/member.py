"""Company membership schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from src.lynkskill.models.enums import DefaultRole, Permission
from src.lynkskill.schemas.invitation import InvitationRead


class MemberRead(BaseModel):
    """A member as shown in team listings."""

    id: UUID
    user_id: UUID
    email: str | None
    full_name: str | None
    default_role: str | None
    custom_role_id: UUID | None
    role_name: str
    extra_permissions: list[str]
    permissions: list[Permission]
    status: str
    joined_via_code: bool
    invited_by_email: str | None
    joined_at: datetime | None
    removed_at: datetime | None


class CompanySummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    logo_url: str | None
    location: str | None


class MyMembershipResponse(BaseModel):
    company: CompanySummary
    member: MemberRead
    is_owner: bool
    is_admin: bool


class MyPermissionsResponse(BaseModel):
    company_id: UUID
    role_name: str
    permissions: list[Permission]


class TeamResponse(BaseModel):
    members: list[MemberRead]
    pending_invitations: list[InvitationRead]


class ChangeRoleRequest(BaseModel):
    """Set exactly one of ``role`` or ``custom_role_id``."""

    role: DefaultRole | None = None
    custom_role_id: UUID | None = None


class ExtraPermissionsRequest(BaseModel):
    permissions: list[str] = Field(default_factory=list)


class TransferOwnershipRequest(BaseModel):
    new_owner_member_id: UUID
