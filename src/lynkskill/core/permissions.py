"""Role and permission resolution for company members.

Everything here is pure: callers pass members (and their custom role, when
they have one) already loaded. Store-backed checks live in
``services/permission_service.py``.
"""

from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum

from src.lynkskill.core.exceptions import ValidationFailedError
from src.lynkskill.models.custom_role import CompanyCustomRole
from src.lynkskill.models.enums import DefaultRole, MemberStatus, Permission
from src.lynkskill.models.member import CompanyMember

P = Permission

DEFAULT_ROLE_PERMISSIONS: dict[DefaultRole, frozenset[Permission]] = {
    DefaultRole.OWNER: frozenset(Permission),
    DefaultRole.ADMIN: frozenset(Permission) - {P.DELETE_COMPANY, P.TRANSFER_OWNERSHIP},
    DefaultRole.HR_MANAGER: frozenset(
        {
            P.INVITE_MEMBERS,
            P.CREATE_INTERNSHIPS,
            P.EDIT_INTERNSHIPS,
            P.DELETE_INTERNSHIPS,
            P.VIEW_APPLICATIONS,
            P.MANAGE_APPLICATIONS,
            P.REVIEW_COVER_LETTERS,
            P.VIEW_CANDIDATES,
            P.SEARCH_CANDIDATES,
            P.SCHEDULE_INTERVIEWS,
            P.CONDUCT_INTERVIEWS,
            P.SEND_MESSAGES,
            P.VIEW_MESSAGES,
            P.CREATE_ASSIGNMENTS,
            P.GRADE_EXPERIENCES,
        }
    ),
    DefaultRole.HR_RECRUITER: frozenset(
        {
            P.VIEW_APPLICATIONS,
            P.MANAGE_APPLICATIONS,
            P.REVIEW_COVER_LETTERS,
            P.VIEW_CANDIDATES,
            P.SEARCH_CANDIDATES,
            P.SCHEDULE_INTERVIEWS,
            P.CONDUCT_INTERVIEWS,
            P.SEND_MESSAGES,
            P.VIEW_MESSAGES,
        }
    ),
    DefaultRole.VIEWER: frozenset({P.VIEW_CANDIDATES, P.VIEW_MESSAGES}),
    DefaultRole.MEMBER: frozenset(
        {P.VIEW_CANDIDATES, P.VIEW_APPLICATIONS, P.SEND_MESSAGES, P.VIEW_MESSAGES}
    ),
}

# Never delegated as extra permissions or placed in a custom role
NON_DELEGABLE_PERMISSIONS: frozenset[Permission] = frozenset(
    {P.DELETE_COMPANY, P.TRANSFER_OWNERSHIP}
)

ROLE_LEVELS: dict[DefaultRole, int] = {
    DefaultRole.OWNER: 6,
    DefaultRole.ADMIN: 5,
    DefaultRole.HR_MANAGER: 4,
    DefaultRole.HR_RECRUITER: 3,
    DefaultRole.MEMBER: 2,
    DefaultRole.VIEWER: 1,
}

ROLE_DISPLAY_INFO: dict[DefaultRole, dict[str, str]] = {
    DefaultRole.OWNER: {
        "label": "Owner",
        "description": "Full access to all company features. Can transfer ownership and delete company.",
        "color": "#7c3aed",
    },
    DefaultRole.ADMIN: {
        "label": "Admin",
        "description": "Full access except ownership transfer and company deletion. Can manage all team members.",
        "color": "#2563eb",
    },
    DefaultRole.HR_MANAGER: {
        "label": "HR Manager",
        "description": "Manage internships, applications, interviews, and candidates. Can invite new members.",
        "color": "#059669",
    },
    DefaultRole.HR_RECRUITER: {
        "label": "HR Recruiter",
        "description": "View and manage applications, schedule interviews, and communicate with candidates.",
        "color": "#d97706",
    },
    DefaultRole.VIEWER: {
        "label": "Viewer",
        "description": "Read-only access to view candidates, messages, and analytics.",
        "color": "#6b7280",
    },
    DefaultRole.MEMBER: {
        "label": "Member",
        "description": "Basic team member who joined via invitation code. Can view and communicate.",
        "color": "#0ea5e9",
    },
}

PERMISSION_DISPLAY_INFO: dict[Permission, dict[str, str]] = {
    P.DELETE_COMPANY: {
        "label": "Delete Company",
        "description": "Permanently delete the company and all associated data",
        "category": "Company Management",
    },
    P.EDIT_COMPANY: {
        "label": "Edit Company",
        "description": "Edit company profile, logo, and settings",
        "category": "Company Management",
    },
    P.TRANSFER_OWNERSHIP: {
        "label": "Transfer Ownership",
        "description": "Transfer company ownership to another member",
        "category": "Company Management",
    },
    P.MANAGE_MEMBERS: {
        "label": "Manage Members",
        "description": "Full control over team members",
        "category": "Member Management",
    },
    P.INVITE_MEMBERS: {
        "label": "Invite Members",
        "description": "Invite new members to the company",
        "category": "Member Management",
    },
    P.REMOVE_MEMBERS: {
        "label": "Remove Members",
        "description": "Remove members from the company",
        "category": "Member Management",
    },
    P.CHANGE_ROLES: {
        "label": "Change Roles",
        "description": "Change the roles of team members",
        "category": "Member Management",
    },
    P.DELEGATE_PERMISSIONS: {
        "label": "Delegate Permissions",
        "description": "Grant additional permissions to team members",
        "category": "Member Management",
    },
    P.CREATE_INTERNSHIPS: {
        "label": "Create Internships",
        "description": "Create new internship listings",
        "category": "Internship Management",
    },
    P.EDIT_INTERNSHIPS: {
        "label": "Edit Internships",
        "description": "Edit existing internship listings",
        "category": "Internship Management",
    },
    P.DELETE_INTERNSHIPS: {
        "label": "Delete Internships",
        "description": "Delete internship listings",
        "category": "Internship Management",
    },
    P.VIEW_APPLICATIONS: {
        "label": "View Applications",
        "description": "View internship applications",
        "category": "Application Management",
    },
    P.MANAGE_APPLICATIONS: {
        "label": "Manage Applications",
        "description": "Manage application status and notes",
        "category": "Application Management",
    },
    P.REVIEW_COVER_LETTERS: {
        "label": "Review Cover Letters",
        "description": "Review and provide feedback on student cover letters",
        "category": "Application Management",
    },
    P.VIEW_CANDIDATES: {
        "label": "View Candidates",
        "description": "View candidate profiles and information",
        "category": "Candidate Management",
    },
    P.SEARCH_CANDIDATES: {
        "label": "Search Candidates",
        "description": "Search and filter candidates",
        "category": "Candidate Management",
    },
    P.SCHEDULE_INTERVIEWS: {
        "label": "Schedule Interviews",
        "description": "Schedule interviews with candidates",
        "category": "Interview Management",
    },
    P.CONDUCT_INTERVIEWS: {
        "label": "Conduct Interviews",
        "description": "Conduct and manage interviews",
        "category": "Interview Management",
    },
    P.SEND_MESSAGES: {
        "label": "Send Messages",
        "description": "Send messages to candidates",
        "category": "Messaging",
    },
    P.VIEW_MESSAGES: {
        "label": "View Messages",
        "description": "View conversation history",
        "category": "Messaging",
    },
    P.CREATE_ASSIGNMENTS: {
        "label": "Create Assignments",
        "description": "Create assignments for interns",
        "category": "Experience & Assignments",
    },
    P.GRADE_EXPERIENCES: {
        "label": "Grade Experiences",
        "description": "Grade and endorse intern experiences",
        "category": "Experience & Assignments",
    },
}


class PermissionCheckReason(str, Enum):
    """Why a permission check came out the way it did (for logs and messages only)."""

    NOT_MEMBER = "NOT_MEMBER"
    INACTIVE_MEMBER = "INACTIVE_MEMBER"
    PERMISSION_DENIED = "PERMISSION_DENIED"
    ALLOWED = "ALLOWED"


@dataclass(frozen=True)
class PermissionCheckResult:
    allowed: bool
    reason: PermissionCheckReason
    member: CompanyMember | None = None


def parse_role(value: DefaultRole | str | None) -> DefaultRole | None:
    """Coerce a stored role string into a DefaultRole; unknown values become None."""
    if value is None or isinstance(value, DefaultRole):
        return value
    try:
        return DefaultRole(value)
    except ValueError:
        return None


def parse_permissions(values: Iterable[str] | None) -> frozenset[Permission]:
    """Coerce stored permission strings, silently dropping values no longer defined."""
    if not values:
        return frozenset()
    parsed = set()
    for value in values:
        try:
            parsed.add(Permission(value))
        except ValueError:
            continue
    return frozenset(parsed)


def parse_grantable_permissions(values: Iterable[str]) -> list[Permission]:
    """Validate permissions requested for delegation or for a custom role.

    Unlike parse_permissions this is strict: unknown and non-delegable
    permissions are rejected. Duplicates collapse; order follows the enum.
    """
    requested: set[Permission] = set()
    for value in values:
        try:
            permission = Permission(value)
        except ValueError:
            raise ValidationFailedError(f"Unknown permission: {value}") from None
        if permission in NON_DELEGABLE_PERMISSIONS:
            raise ValidationFailedError(f"Permission {permission.value} cannot be granted")
        requested.add(permission)
    return [p for p in Permission if p in requested]


def effective_permissions(
    member: CompanyMember | None,
    custom_role: CompanyCustomRole | None = None,
) -> frozenset[Permission]:
    """Union of the member's base role permissions and its extra permissions.

    The base role is the custom role when ``custom_role`` is given and matches
    ``member.custom_role_id``, otherwise the default role table entry. A member
    with neither holds only its extra permissions.
    """
    if member is None:
        return frozenset()

    base: frozenset[Permission] = frozenset()
    if custom_role is not None and member.custom_role_id == custom_role.id:
        base = parse_permissions(custom_role.permissions)
    else:
        role = parse_role(member.default_role)
        if role is not None:
            base = DEFAULT_ROLE_PERMISSIONS[role]

    return base | parse_permissions(member.extra_permissions)


def has_permission(
    member: CompanyMember | None,
    permission: Permission,
    custom_role: CompanyCustomRole | None = None,
) -> bool:
    return permission in effective_permissions(member, custom_role)


def has_any_permission(
    member: CompanyMember | None,
    permissions: Iterable[Permission],
    custom_role: CompanyCustomRole | None = None,
) -> bool:
    held = effective_permissions(member, custom_role)
    return any(p in held for p in permissions)


def has_all_permissions(
    member: CompanyMember | None,
    permissions: Iterable[Permission],
    custom_role: CompanyCustomRole | None = None,
) -> bool:
    held = effective_permissions(member, custom_role)
    return all(p in held for p in permissions)


def evaluate_permission(
    member: CompanyMember | None,
    permission: Permission,
    custom_role: CompanyCustomRole | None = None,
) -> PermissionCheckResult:
    """Decide a permission for an already-loaded member and say why."""
    if member is None:
        return PermissionCheckResult(False, PermissionCheckReason.NOT_MEMBER)
    if member.status != MemberStatus.ACTIVE.value:
        return PermissionCheckResult(False, PermissionCheckReason.INACTIVE_MEMBER, member)
    if not has_permission(member, permission, custom_role):
        return PermissionCheckResult(False, PermissionCheckReason.PERMISSION_DENIED, member)
    return PermissionCheckResult(True, PermissionCheckReason.ALLOWED, member)


def role_has_permission(role: DefaultRole, permission: Permission) -> bool:
    return permission in DEFAULT_ROLE_PERMISSIONS[role]


def get_role_level(role: DefaultRole | str | None) -> int:
    parsed = parse_role(role)
    return ROLE_LEVELS[parsed] if parsed is not None else 0


def can_manage_role(manager_role: DefaultRole | str | None, target_role: DefaultRole | str | None) -> bool:
    """OWNER manages everyone, ADMIN manages everyone but OWNER, nobody else manages anyone.

    A member on a custom role (``None`` default role) is managed like any
    non-owner and manages no one.
    """
    manager = parse_role(manager_role)
    target = parse_role(target_role)
    if manager == DefaultRole.OWNER:
        return True
    if manager == DefaultRole.ADMIN:
        return target != DefaultRole.OWNER
    return False


def get_permissions_by_category() -> dict[str, list[Permission]]:
    grouped: dict[str, list[Permission]] = {}
    for permission, info in PERMISSION_DISPLAY_INFO.items():
        grouped.setdefault(info["category"], []).append(permission)
    return grouped


def get_role_display_name(
    member: CompanyMember | None,
    custom_role: CompanyCustomRole | None = None,
) -> str:
    """Human-readable role name; custom role names take precedence."""
    if member is None:
        return "Unknown"
    if custom_role is not None and member.custom_role_id == custom_role.id:
        return custom_role.name
    return get_role_label(member.default_role)


def get_role_label(
    role: DefaultRole | str | None,
    custom_role: CompanyCustomRole | None = None,
) -> str:
    if custom_role is not None:
        return custom_role.name
    parsed = parse_role(role)
    if parsed is None:
        return "Unknown"
    if parsed == DefaultRole.MEMBER:
        return "Team Member"
    return ROLE_DISPLAY_INFO[parsed]["label"]


def is_owner(member: CompanyMember | None) -> bool:
    return member is not None and member.default_role == DefaultRole.OWNER.value


def is_admin_or_owner(member: CompanyMember | None) -> bool:
    return member is not None and member.default_role in (
        DefaultRole.OWNER.value,
        DefaultRole.ADMIN.value,
    )
