"""FastAPI dependency injection definitions."""

from src.lynkskill.api.dependencies.auth import (
    CurrentMembership,
    CurrentUser,
    get_current_membership,
    get_current_user,
)
from src.lynkskill.api.dependencies.db import DBSession, get_db_session
from src.lynkskill.api.dependencies.services import (
    AuditServiceDep,
    CompanyCodeServiceDep,
    CustomRoleServiceDep,
    InvitationServiceDep,
    MemberServiceDep,
    NotificationServiceDep,
    PermissionServiceDep,
)

__all__ = [
    # Database
    "DBSession",
    "get_db_session",
    # Auth
    "CurrentMembership",
    "CurrentUser",
    "get_current_membership",
    "get_current_user",
    # Services
    "AuditServiceDep",
    "CompanyCodeServiceDep",
    "CustomRoleServiceDep",
    "InvitationServiceDep",
    "MemberServiceDep",
    "NotificationServiceDep",
    "PermissionServiceDep",
]
