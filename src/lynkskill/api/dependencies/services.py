"""Service factory dependencies."""

from collections.abc import AsyncGenerator
from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from src.lynkskill.api.dependencies.db import DBSession
from src.lynkskill.api.dependencies.repositories import (
    CompanyRepo,
    CustomRoleRepo,
    InvitationRepo,
    MemberRepo,
    NotificationRepo,
    UserRepo,
)
from src.lynkskill.core.db.engine import get_engine
from src.lynkskill.repositories import AuditLogRepository
from src.lynkskill.services import (
    AuditService,
    CompanyCodeService,
    CustomRoleService,
    InvitationService,
    MemberService,
    NotificationService,
    PermissionService,
)


def get_permission_service(
    member_repo: MemberRepo, custom_role_repo: CustomRoleRepo
) -> PermissionService:
    return PermissionService(member_repo, custom_role_repo)


def get_notification_service(
    notification_repo: NotificationRepo, session: DBSession
) -> NotificationService:
    return NotificationService(notification_repo, session)


async def get_audit_service() -> AsyncGenerator[AuditService]:
    """Get audit service with its own isolated session.

    Audit rows commit independently from the business transaction.
    """
    engine = get_engine()
    async with AsyncSession(engine, expire_on_commit=False) as session:
        yield AuditService(AuditLogRepository(session), session)


PermissionServiceDep = Annotated[PermissionService, Depends(get_permission_service)]
NotificationServiceDep = Annotated[NotificationService, Depends(get_notification_service)]
AuditServiceDep = Annotated[AuditService, Depends(get_audit_service)]


def get_invitation_service(
    invitation_repo: InvitationRepo,
    member_repo: MemberRepo,
    user_repo: UserRepo,
    company_repo: CompanyRepo,
    custom_role_repo: CustomRoleRepo,
    permission_service: PermissionServiceDep,
    notification_service: NotificationServiceDep,
    audit_service: AuditServiceDep,
    session: DBSession,
) -> InvitationService:
    return InvitationService(
        invitation_repo,
        member_repo,
        user_repo,
        company_repo,
        custom_role_repo,
        permission_service,
        notification_service,
        audit_service,
        session,
    )


def get_company_code_service(
    company_repo: CompanyRepo,
    member_repo: MemberRepo,
    user_repo: UserRepo,
    permission_service: PermissionServiceDep,
    notification_service: NotificationServiceDep,
    audit_service: AuditServiceDep,
    session: DBSession,
) -> CompanyCodeService:
    return CompanyCodeService(
        company_repo,
        member_repo,
        user_repo,
        permission_service,
        notification_service,
        audit_service,
        session,
    )


def get_member_service(
    member_repo: MemberRepo,
    user_repo: UserRepo,
    company_repo: CompanyRepo,
    custom_role_repo: CustomRoleRepo,
    invitation_repo: InvitationRepo,
    permission_service: PermissionServiceDep,
    notification_service: NotificationServiceDep,
    audit_service: AuditServiceDep,
    session: DBSession,
) -> MemberService:
    return MemberService(
        member_repo,
        user_repo,
        company_repo,
        custom_role_repo,
        invitation_repo,
        permission_service,
        notification_service,
        audit_service,
        session,
    )


def get_custom_role_service(
    custom_role_repo: CustomRoleRepo,
    member_repo: MemberRepo,
    invitation_repo: InvitationRepo,
    permission_service: PermissionServiceDep,
    audit_service: AuditServiceDep,
    session: DBSession,
) -> CustomRoleService:
    return CustomRoleService(
        custom_role_repo,
        member_repo,
        invitation_repo,
        permission_service,
        audit_service,
        session,
    )


InvitationServiceDep = Annotated[InvitationService, Depends(get_invitation_service)]
CompanyCodeServiceDep = Annotated[CompanyCodeService, Depends(get_company_code_service)]
MemberServiceDep = Annotated[MemberService, Depends(get_member_service)]
CustomRoleServiceDep = Annotated[CustomRoleService, Depends(get_custom_role_service)]
