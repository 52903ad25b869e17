"""Company-scoped custom role model."""

from datetime import datetime
from uuid import UUID, uuid7

from sqlalchemy import Column, UniqueConstraint
from sqlalchemy.dialects.postgresql import JSONB
from sqlmodel import Field, SQLModel

from src.lynkskill.models.base import utc_now


class CompanyCustomRole(SQLModel, table=True):
    """Named permission set defined by a company and shared by its members."""

    __tablename__ = "company_custom_roles"
    __table_args__ = (UniqueConstraint("company_id", "name", name="uq_custom_roles_company_name"),)

    id: UUID = Field(default_factory=uuid7, primary_key=True)
    company_id: UUID = Field(foreign_key="companies.id", index=True)
    name: str = Field(max_length=50)
    color: str | None = Field(default=None, max_length=20)
    permissions: list[str] = Field(
        default_factory=list,
        sa_column=Column(JSONB, nullable=False, server_default="[]"),
    )
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)
