from src.lynkskill.schemas.audit import AuditLogListResponse, AuditLogRead
from src.lynkskill.schemas.company_code import (
    CodeJoinListResponse,
    CodeJoinRead,
    CodeSettingsResponse,
    CodeSettingsUpdateRequest,
    CompanyPreview,
    JoinCodeRequest,
    JoinPreviewResponse,
    JoinResponse,
)
from src.lynkskill.schemas.custom_role import CustomRoleCreate, CustomRoleRead, CustomRoleUpdate
from src.lynkskill.schemas.invitation import (
    InvitationAcceptResponse,
    InvitationCreateRequest,
    InvitationCreateResponse,
    InvitationInfoResponse,
    InvitationRead,
)
from src.lynkskill.schemas.member import (
    ChangeRoleRequest,
    CompanySummary,
    ExtraPermissionsRequest,
    MemberRead,
    MyMembershipResponse,
    MyPermissionsResponse,
    TeamResponse,
    TransferOwnershipRequest,
)
from src.lynkskill.schemas.notification import NotificationListResponse, NotificationRead
from src.lynkskill.schemas.pagination import PaginatedResponse

__all__ = [
    # Audit
    "AuditLogListResponse",
    "AuditLogRead",
    # Company code
    "CodeJoinListResponse",
    "CodeJoinRead",
    "CodeSettingsResponse",
    "CodeSettingsUpdateRequest",
    "CompanyPreview",
    "JoinCodeRequest",
    "JoinPreviewResponse",
    "JoinResponse",
    # Custom roles
    "CustomRoleCreate",
    "CustomRoleRead",
    "CustomRoleUpdate",
    # Invitations
    "InvitationAcceptResponse",
    "InvitationCreateRequest",
    "InvitationCreateResponse",
    "InvitationInfoResponse",
    "InvitationRead",
    # Members
    "ChangeRoleRequest",
    "CompanySummary",
    "ExtraPermissionsRequest",
    "MemberRead",
    "MyMembershipResponse",
    "MyPermissionsResponse",
    "TeamResponse",
    "TransferOwnershipRequest",
    # Notifications
    "NotificationListResponse",
    "NotificationRead",
    # Pagination
    "PaginatedResponse",
]
