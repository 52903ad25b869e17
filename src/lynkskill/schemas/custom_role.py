"""Custom role schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

_COLOR_PATTERN = r"^#[0-9a-fA-F]{6}$"


class CustomRoleCreate(BaseModel):
    name: str = Field(min_length=1, max_length=50)
    color: str | None = Field(default=None, pattern=_COLOR_PATTERN)
    permissions: list[str] = Field(default_factory=list)


class CustomRoleUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=50)
    color: str | None = Field(default=None, pattern=_COLOR_PATTERN)
    permissions: list[str] | None = None


class CustomRoleRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    company_id: UUID
    name: str
    color: str | None
    permissions: list[str]
    created_at: datetime
    updated_at: datetime
