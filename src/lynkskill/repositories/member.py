"""Repository for CompanyMember entity."""

from uuid import UUID

from sqlalchemy import func
from sqlmodel import col, select

from src.lynkskill.models.enums import DefaultRole, MemberStatus
from src.lynkskill.models.member import CompanyMember
from src.lynkskill.models.user import User
from src.lynkskill.repositories.base import BaseRepository


class CompanyMemberRepository(BaseRepository[CompanyMember]):
    """Company memberships. A user has at most one ACTIVE row system-wide."""

    model = CompanyMember

    async def get_active_by_user(self, user_id: UUID) -> CompanyMember | None:
        """Get the user's active membership in any company."""
        result = await self.session.execute(
            select(CompanyMember).where(
                CompanyMember.user_id == user_id,
                CompanyMember.status == MemberStatus.ACTIVE.value,
            )
        )
        return result.scalars().first()

    async def get_by_user_and_company(
        self, user_id: UUID, company_id: UUID
    ) -> CompanyMember | None:
        """Get the user's most recent membership row in a company, whatever its status."""
        result = await self.session.execute(
            select(CompanyMember)
            .where(
                CompanyMember.user_id == user_id,
                CompanyMember.company_id == company_id,
            )
            .order_by(col(CompanyMember.created_at).desc())
        )
        return result.scalars().first()

    async def get_in_company(self, member_id: UUID, company_id: UUID) -> CompanyMember | None:
        """Get a member by id, scoped to a company."""
        result = await self.session.execute(
            select(CompanyMember).where(
                CompanyMember.id == member_id,
                CompanyMember.company_id == company_id,
            )
        )
        return result.scalar_one_or_none()

    async def get_owner(self, company_id: UUID) -> CompanyMember | None:
        result = await self.session.execute(
            select(CompanyMember).where(
                CompanyMember.company_id == company_id,
                CompanyMember.default_role == DefaultRole.OWNER.value,
                CompanyMember.status == MemberStatus.ACTIVE.value,
            )
        )
        return result.scalars().first()

    async def list_with_users(
        self, company_id: UUID, statuses: tuple[MemberStatus, ...] = (MemberStatus.ACTIVE,)
    ) -> list[tuple[CompanyMember, User]]:
        """List company members joined with their user rows, oldest first."""
        result = await self.session.execute(
            select(CompanyMember, User)
            .join(User, col(User.id) == col(CompanyMember.user_id))
            .where(
                CompanyMember.company_id == company_id,
                col(CompanyMember.status).in_([s.value for s in statuses]),
            )
            .order_by(col(CompanyMember.created_at))
        )
        return [(member, user) for member, user in result.all()]

    async def count_active(self, company_id: UUID) -> int:
        result = await self.session.execute(
            select(func.count())
            .select_from(CompanyMember)
            .where(
                CompanyMember.company_id == company_id,
                CompanyMember.status == MemberStatus.ACTIVE.value,
            )
        )
        return int(result.scalar_one())

    async def count_by_custom_role(self, custom_role_id: UUID) -> int:
        """Count ACTIVE or PENDING members on a custom role."""
        result = await self.session.execute(
            select(func.count())
            .select_from(CompanyMember)
            .where(
                CompanyMember.custom_role_id == custom_role_id,
                col(CompanyMember.status).in_(
                    [MemberStatus.ACTIVE.value, MemberStatus.PENDING.value]
                ),
            )
        )
        return int(result.scalar_one())

    async def list_code_joins_paginated(
        self, company_id: UUID, cursor: str | None, limit: int
    ) -> tuple[list[CompanyMember], str | None, bool]:
        """Members who joined with the company code, newest first."""
        query = select(CompanyMember).where(
            CompanyMember.company_id == company_id,
            CompanyMember.joined_via_code == True,  # noqa: E712
        )
        return await self.paginate(query, cursor, limit, CompanyMember.created_at)
