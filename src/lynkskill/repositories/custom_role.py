"""Repository for CompanyCustomRole entity."""

from uuid import UUID

from sqlalchemy import func
from sqlmodel import col, select

from src.lynkskill.models.custom_role import CompanyCustomRole
from src.lynkskill.repositories.base import BaseRepository


class CompanyCustomRoleRepository(BaseRepository[CompanyCustomRole]):
    model = CompanyCustomRole

    async def list_by_company(self, company_id: UUID) -> list[CompanyCustomRole]:
        result = await self.session.execute(
            select(CompanyCustomRole)
            .where(CompanyCustomRole.company_id == company_id)
            .order_by(col(CompanyCustomRole.name))
        )
        return list(result.scalars().all())

    async def get_in_company(self, role_id: UUID, company_id: UUID) -> CompanyCustomRole | None:
        """Get a custom role only if it belongs to the company."""
        result = await self.session.execute(
            select(CompanyCustomRole).where(
                CompanyCustomRole.id == role_id,
                CompanyCustomRole.company_id == company_id,
            )
        )
        return result.scalar_one_or_none()

    async def get_by_name(self, company_id: UUID, name: str) -> CompanyCustomRole | None:
        """Get a custom role by name (case-insensitive) within a company."""
        result = await self.session.execute(
            select(CompanyCustomRole).where(
                CompanyCustomRole.company_id == company_id,
                func.lower(CompanyCustomRole.name) == name.lower(),
            )
        )
        return result.scalar_one_or_none()
