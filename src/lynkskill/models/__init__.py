"""Model exports.

Import from here: `from src.lynkskill.models import Company, CompanyMember`
"""

from src.lynkskill.models.audit import AuditAction, AuditLog, AuditStatus
from src.lynkskill.models.company import Company
from src.lynkskill.models.custom_role import CompanyCustomRole
from src.lynkskill.models.enums import (
    DefaultRole,
    MemberStatus,
    NotificationType,
    Permission,
    UserRole,
)
from src.lynkskill.models.invitation import CompanyInvitation
from src.lynkskill.models.member import CompanyMember
from src.lynkskill.models.notification import Notification
from src.lynkskill.models.user import User

__all__ = [
    # Enums
    "AuditAction",
    "AuditStatus",
    "DefaultRole",
    "MemberStatus",
    "NotificationType",
    "Permission",
    "UserRole",
    # Tables
    "AuditLog",
    "Company",
    "CompanyCustomRole",
    "CompanyInvitation",
    "CompanyMember",
    "Notification",
    "User",
]
