"""Repository layer - data access abstraction."""

from src.lynkskill.repositories.audit import AuditLogRepository
from src.lynkskill.repositories.base import BaseRepository
from src.lynkskill.repositories.company import CompanyRepository
from src.lynkskill.repositories.custom_role import CompanyCustomRoleRepository
from src.lynkskill.repositories.invitation import CompanyInvitationRepository
from src.lynkskill.repositories.member import CompanyMemberRepository
from src.lynkskill.repositories.notification import NotificationRepository
from src.lynkskill.repositories.user import UserRepository

__all__ = [
    "AuditLogRepository",
    "BaseRepository",
    "CompanyCustomRoleRepository",
    "CompanyInvitationRepository",
    "CompanyMemberRepository",
    "CompanyRepository",
    "NotificationRepository",
    "UserRepository",
]
