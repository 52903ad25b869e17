"""Repository factory dependencies."""

from typing import Annotated

from fastapi import Depends

from src.lynkskill.api.dependencies.db import DBSession
from src.lynkskill.repositories import (
    CompanyCustomRoleRepository,
    CompanyInvitationRepository,
    CompanyMemberRepository,
    CompanyRepository,
    NotificationRepository,
    UserRepository,
)


def get_user_repository(session: DBSession) -> UserRepository:
    return UserRepository(session)


def get_company_repository(session: DBSession) -> CompanyRepository:
    return CompanyRepository(session)


def get_member_repository(session: DBSession) -> CompanyMemberRepository:
    return CompanyMemberRepository(session)


def get_invitation_repository(session: DBSession) -> CompanyInvitationRepository:
    return CompanyInvitationRepository(session)


def get_custom_role_repository(session: DBSession) -> CompanyCustomRoleRepository:
    return CompanyCustomRoleRepository(session)


def get_notification_repository(session: DBSession) -> NotificationRepository:
    return NotificationRepository(session)


UserRepo = Annotated[UserRepository, Depends(get_user_repository)]
CompanyRepo = Annotated[CompanyRepository, Depends(get_company_repository)]
MemberRepo = Annotated[CompanyMemberRepository, Depends(get_member_repository)]
InvitationRepo = Annotated[CompanyInvitationRepository, Depends(get_invitation_repository)]
CustomRoleRepo = Annotated[CompanyCustomRoleRepository, Depends(get_custom_role_repository)]
NotificationRepo = Annotated[NotificationRepository, Depends(get_notification_repository)]
