"""Concurrency tests: invitation acceptance and code joins against PostgreSQL.

Each racer gets its own session (its own connection), so the conditional
UPDATE and the ``FOR UPDATE`` row lock are what keep the outcomes consistent.
"""

import asyncio
from datetime import timedelta

import pytest
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession

from src.lynkskill.core.exceptions import ConflictError
from src.lynkskill.core.security import generate_invitation_token, hash_token
from src.lynkskill.models import Company, CompanyInvitation, CompanyMember, User
from src.lynkskill.models.base import utc_now
from src.lynkskill.models.enums import DefaultRole, MemberStatus, UserRole
from tests.helpers import build_company_code_service, build_invitation_service

pytestmark = pytest.mark.integration


async def _count_members(engine: AsyncEngine, **filters) -> int:
    async with AsyncSession(engine) as session:
        query = select(func.count()).select_from(CompanyMember)
        for name, value in filters.items():
            query = query.where(getattr(CompanyMember, name) == value)
        return int((await session.execute(query)).scalar_one())


class TestConcurrentAcceptance:
    @pytest.fixture
    async def invitation_token(self, db_session, company, owner, make_user):
        invitee = await make_user(email="racer@example.com")
        token = generate_invitation_token()
        db_session.add(
            CompanyInvitation(
                company_id=company.id,
                email=invitee.email,
                token_hash=hash_token(token),
                role=DefaultRole.HR_RECRUITER.value,
                invited_by_user_id=owner.id,
                expires_at=utc_now() + timedelta(days=7),
            )
        )
        await db_session.commit()
        return token, invitee

    async def _accept(self, engine: AsyncEngine, token: str, user_id) -> CompanyMember:
        async with AsyncSession(engine, expire_on_commit=False) as session:
            user = await session.get(User, user_id)
            return await build_invitation_service(session).accept_invitation(token, user)

    async def test_one_member_for_concurrent_acceptances(
        self, engine, company, invitation_token
    ):
        token, invitee = invitation_token

        results = await asyncio.gather(
            self._accept(engine, token, invitee.id),
            self._accept(engine, token, invitee.id),
            return_exceptions=True,
        )

        members = [r for r in results if isinstance(r, CompanyMember)]
        errors = [r for r in results if isinstance(r, Exception)]
        assert len(members) == 1
        assert len(errors) == 1
        assert isinstance(errors[0], ConflictError)
        assert members[0].default_role == DefaultRole.HR_RECRUITER.value
        assert await _count_members(engine, company_id=company.id, user_id=invitee.id) == 1

    async def test_acceptance_marks_invitation_and_promotes_account(
        self, engine, company, invitation_token
    ):
        token, invitee = invitation_token

        await self._accept(engine, token, invitee.id)

        async with AsyncSession(engine) as session:
            invitation = (
                await session.execute(
                    select(CompanyInvitation).where(
                        CompanyInvitation.token_hash == hash_token(token)
                    )
                )
            ).scalar_one()
            user = await session.get(User, invitee.id)
        assert invitation.accepted_at is not None
        assert user.role == UserRole.TEAM_MEMBER.value

        with pytest.raises(ConflictError, match="already been accepted"):
            await self._accept(engine, token, invitee.id)


class TestConcurrentCodeJoin:
    async def _join(self, engine: AsyncEngine, code: str, user_id) -> CompanyMember:
        async with AsyncSession(engine, expire_on_commit=False) as session:
            user = await session.get(User, user_id)
            return await build_company_code_service(session).join_via_code(code, user)

    async def test_last_seat_goes_to_one_joiner(
        self, engine, db_session, company, owner, make_user
    ):
        db_session.add(
            CompanyMember(
                user_id=owner.id,
                company_id=company.id,
                default_role=DefaultRole.OWNER.value,
                status=MemberStatus.ACTIVE.value,
                joined_at=utc_now(),
            )
        )
        company.max_team_members = 2
        db_session.add(company)
        await db_session.commit()
        first = await make_user()
        second = await make_user()

        results = await asyncio.gather(
            self._join(engine, company.invitation_code, first.id),
            self._join(engine, company.invitation_code, second.id),
            return_exceptions=True,
        )

        members = [r for r in results if isinstance(r, CompanyMember)]
        errors = [r for r in results if isinstance(r, Exception)]
        assert len(members) == 1
        assert len(errors) == 1
        assert isinstance(errors[0], ConflictError)
        assert "maximum team size" in str(errors[0])
        assert await _count_members(
            engine, company_id=company.id, status=MemberStatus.ACTIVE.value
        ) == 2

        async with AsyncSession(engine) as session:
            refreshed = await session.get(Company, company.id)
        assert refreshed.code_usage_count == 1

    async def test_joins_below_ceiling_all_succeed(self, engine, company, make_user):
        joiners = [await make_user() for _ in range(3)]

        results = await asyncio.gather(
            *(self._join(engine, company.invitation_code, u.id) for u in joiners)
        )

        assert all(m.joined_via_code for m in results)
        assert await _count_members(engine, company_id=company.id) == 3
