"""Company code schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field


class CodeSettingsResponse(BaseModel):
    code: str | None
    masked_code: str
    enabled: bool
    expires_at: datetime | None
    is_expired: bool
    time_until_expiry: str | None
    max_team_members: int | None
    current_members: int
    usage_count: int
    last_regenerated_at: datetime | None
    can_regenerate_at: datetime | None


class CodeSettingsUpdateRequest(BaseModel):
    """Partial update. Send ``null`` to clear expiry or the team-size ceiling."""

    enabled: bool | None = None
    expires_at: datetime | None = None
    max_team_members: int | None = Field(default=None, ge=1)


class JoinCodeRequest(BaseModel):
    code: str = Field(min_length=1, max_length=64)


class CompanyPreview(BaseModel):
    id: UUID
    name: str
    logo_url: str | None
    location: str | None
    description: str | None
    member_count: int


class JoinPreviewResponse(BaseModel):
    valid: bool = True
    company: CompanyPreview


class JoinResponse(BaseModel):
    member_id: UUID
    company_id: UUID
    role: str
    message: str = "Joined company successfully"


class CodeJoinRead(BaseModel):
    member_id: UUID
    user_id: UUID
    user_name: str | None
    user_email: str | None
    status: str
    joined_at: datetime | None


class CodeJoinListResponse(BaseModel):
    items: list[CodeJoinRead]
    next_cursor: str | None = None
    has_more: bool = False
