"""Shared test helpers: services wired to real repositories."""

from unittest.mock import AsyncMock, MagicMock

from sqlalchemy.ext.asyncio import AsyncSession

from src.lynkskill.repositories import (
    CompanyCustomRoleRepository,
    CompanyInvitationRepository,
    CompanyMemberRepository,
    CompanyRepository,
    UserRepository,
)
from src.lynkskill.services.company_code_service import CompanyCodeService
from src.lynkskill.services.invitation_service import InvitationService


def _side_effect_services() -> tuple[MagicMock, MagicMock, MagicMock]:
    """Permission, notification and audit services that always succeed."""
    permission_service = MagicMock()
    permission_service.require_permission = AsyncMock()
    notification_service = MagicMock()
    notification_service.notify = AsyncMock()
    audit_service = MagicMock()
    audit_service.log_action = AsyncMock()
    return permission_service, notification_service, audit_service


def build_invitation_service(session: AsyncSession) -> InvitationService:
    permission_service, notification_service, audit_service = _side_effect_services()
    return InvitationService(
        CompanyInvitationRepository(session),
        CompanyMemberRepository(session),
        UserRepository(session),
        CompanyRepository(session),
        CompanyCustomRoleRepository(session),
        permission_service,
        notification_service,
        audit_service,
        session,
    )


def build_company_code_service(session: AsyncSession) -> CompanyCodeService:
    permission_service, notification_service, audit_service = _side_effect_services()
    return CompanyCodeService(
        CompanyRepository(session),
        CompanyMemberRepository(session),
        UserRepository(session),
        permission_service,
        notification_service,
        audit_service,
        session,
    )
