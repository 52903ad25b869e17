"""Repository for Company entity."""

from uuid import UUID

from sqlmodel import select

from src.lynkskill.models.company import Company
from src.lynkskill.repositories.base import BaseRepository


class CompanyRepository(BaseRepository[Company]):
    model = Company

    async def get_by_code(self, code: str, for_update: bool = False) -> Company | None:
        """Get the company whose current invitation code is exactly ``code``.

        With ``for_update`` the row is locked until the transaction ends, which
        serializes concurrent joins against the same company.
        """
        query = select(Company).where(Company.invitation_code == code)
        if for_update:
            query = query.with_for_update()
        result = await self.session.execute(query)
        return result.scalar_one_or_none()

    async def get_for_update(self, company_id: UUID) -> Company | None:
        result = await self.session.execute(
            select(Company).where(Company.id == company_id).with_for_update()
        )
        return result.scalar_one_or_none()

    async def code_exists(self, code: str) -> bool:
        result = await self.session.execute(
            select(Company.id).where(Company.invitation_code == code)
        )
        return result.first() is not None
