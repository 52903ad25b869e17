"""Repository for CompanyInvitation entity."""

from typing import Any, cast
from uuid import UUID

from sqlalchemy import func, update
from sqlalchemy.engine import CursorResult
from sqlmodel import col, select

from src.lynkskill.models.base import utc_now
from src.lynkskill.models.invitation import CompanyInvitation
from src.lynkskill.repositories.base import BaseRepository


class CompanyInvitationRepository(BaseRepository[CompanyInvitation]):
    model = CompanyInvitation

    async def get_by_hash(self, token_hash: str) -> CompanyInvitation | None:
        """Get an invitation by token hash, whatever its state."""
        result = await self.session.execute(
            select(CompanyInvitation).where(CompanyInvitation.token_hash == token_hash)
        )
        return result.scalar_one_or_none()

    async def get_in_company(
        self, invitation_id: UUID, company_id: UUID
    ) -> CompanyInvitation | None:
        result = await self.session.execute(
            select(CompanyInvitation).where(
                CompanyInvitation.id == invitation_id,
                CompanyInvitation.company_id == company_id,
            )
        )
        return result.scalar_one_or_none()

    async def get_outstanding_for_email(
        self, email: str, company_id: UUID
    ) -> CompanyInvitation | None:
        """Get an unaccepted, unexpired invitation for ``email`` to this company."""
        result = await self.session.execute(
            select(CompanyInvitation).where(
                func.lower(CompanyInvitation.email) == email.lower(),
                CompanyInvitation.company_id == company_id,
                col(CompanyInvitation.accepted_at).is_(None),
                CompanyInvitation.expires_at > utc_now(),
            )
        )
        return result.scalars().first()

    async def list_pending(self, company_id: UUID) -> list[CompanyInvitation]:
        """List unaccepted invitations for a company, newest first (expired included)."""
        result = await self.session.execute(
            select(CompanyInvitation)
            .where(
                CompanyInvitation.company_id == company_id,
                col(CompanyInvitation.accepted_at).is_(None),
            )
            .order_by(col(CompanyInvitation.created_at).desc())
        )
        return list(result.scalars().all())

    async def count_pending_by_custom_role(self, custom_role_id: UUID) -> int:
        result = await self.session.execute(
            select(func.count())
            .select_from(CompanyInvitation)
            .where(
                CompanyInvitation.custom_role_id == custom_role_id,
                col(CompanyInvitation.accepted_at).is_(None),
            )
        )
        return int(result.scalar_one())

    async def mark_accepted(self, invitation: CompanyInvitation) -> bool:
        """Set accepted_at only if no one has accepted the invitation yet.

        Returns False when a concurrent acceptance got there first. The
        in-session object is synchronized by the ORM-enabled UPDATE.
        """
        result = await self.session.execute(
            update(CompanyInvitation)
            .where(
                col(CompanyInvitation.id) == invitation.id,
                col(CompanyInvitation.accepted_at).is_(None),
            )
            .values(accepted_at=utc_now())
        )
        return (cast(CursorResult[Any], result).rowcount or 0) == 1
