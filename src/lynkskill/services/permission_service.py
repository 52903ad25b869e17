"""Store-backed permission checks for company members."""

from uuid import UUID

from src.lynkskill.core.exceptions import PermissionDeniedError
from src.lynkskill.core.logging import get_logger
from src.lynkskill.core.permissions import (
    PermissionCheckResult,
    effective_permissions,
    evaluate_permission,
)
from src.lynkskill.models.custom_role import CompanyCustomRole
from src.lynkskill.models.enums import Permission
from src.lynkskill.models.member import CompanyMember
from src.lynkskill.repositories.custom_role import CompanyCustomRoleRepository
from src.lynkskill.repositories.member import CompanyMemberRepository

logger = get_logger(__name__)


class PermissionService:
    """Answers "may this user do X in this company?" from the stored memberships.

    The boolean checks collapse "not a member", "not active" and
    "lacks the permission" into False. Use ``check_permission_detailed`` when
    the reason is needed for logs or messages.
    """

    def __init__(
        self,
        member_repo: CompanyMemberRepository,
        custom_role_repo: CompanyCustomRoleRepository,
    ):
        self.member_repo = member_repo
        self.custom_role_repo = custom_role_repo

    async def get_custom_role(self, member: CompanyMember) -> CompanyCustomRole | None:
        if member.custom_role_id is None:
            return None
        return await self.custom_role_repo.get_in_company(member.custom_role_id, member.company_id)

    async def get_effective_permissions(self, member: CompanyMember) -> frozenset[Permission]:
        return effective_permissions(member, await self.get_custom_role(member))

    async def check_permission_detailed(
        self, user_id: UUID, company_id: UUID, permission: Permission
    ) -> PermissionCheckResult:
        member = await self.member_repo.get_by_user_and_company(user_id, company_id)
        custom_role = await self.get_custom_role(member) if member is not None else None
        result = evaluate_permission(member, permission, custom_role)
        if not result.allowed:
            logger.info(
                "Permission check denied",
                user_id=str(user_id),
                company_id=str(company_id),
                permission=permission.value,
                reason=result.reason.value,
            )
        return result

    async def check_permission(
        self, user_id: UUID, company_id: UUID, permission: Permission
    ) -> bool:
        result = await self.check_permission_detailed(user_id, company_id, permission)
        return result.allowed

    async def require_permission(
        self, user_id: UUID, company_id: UUID, permission: Permission
    ) -> CompanyMember:
        """Return the acting member, or raise PermissionDeniedError naming the permission."""
        result = await self.check_permission_detailed(user_id, company_id, permission)
        if not result.allowed or result.member is None:
            raise PermissionDeniedError(permission.value)
        return result.member

    async def require_member(self, user_id: UUID, company_id: UUID) -> CompanyMember:
        """Return the user's ACTIVE membership in the company or raise."""
        member = await self.member_repo.get_by_user_and_company(user_id, company_id)
        if member is None or not member.is_active:
            raise PermissionDeniedError(message="You are not a member of this company")
        return member

