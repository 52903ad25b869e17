from src.lynkskill.services.audit_service import AuditService
from src.lynkskill.services.company_code_service import CompanyCodeService
from src.lynkskill.services.custom_role_service import CustomRoleService
from src.lynkskill.services.invitation_service import InvitationService
from src.lynkskill.services.member_service import MemberService
from src.lynkskill.services.notification_service import NotificationService
from src.lynkskill.services.permission_service import PermissionService

__all__ = [
    "AuditService",
    "CompanyCodeService",
    "CustomRoleService",
    "InvitationService",
    "MemberService",
    "NotificationService",
    "PermissionService",
]
