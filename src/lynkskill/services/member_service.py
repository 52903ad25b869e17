"""Company team member management."""

from dataclasses import dataclass
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from src.lynkskill.core.exceptions import (
    ConflictError,
    NotFoundError,
    PermissionDeniedError,
    ValidationFailedError,
)
from src.lynkskill.core.logging import get_logger
from src.lynkskill.core.permissions import (
    can_manage_role,
    effective_permissions,
    get_role_display_name,
    get_role_label,
    is_admin_or_owner,
    is_owner,
    parse_grantable_permissions,
    parse_role,
)
from src.lynkskill.models.audit import AuditAction
from src.lynkskill.models.base import utc_now
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
from src.lynkskill.models.user import User
from src.lynkskill.repositories import (
    CompanyCustomRoleRepository,
    CompanyInvitationRepository,
    CompanyMemberRepository,
    CompanyRepository,
    UserRepository,
)
from src.lynkskill.services.audit_service import AuditService
from src.lynkskill.services.notification_service import NotificationService
from src.lynkskill.services.permission_service import PermissionService

logger = get_logger(__name__)

TEAM_PAGE_LINK = "/dashboard/company/team"


@dataclass(frozen=True)
class MembershipView:
    """A member resolved for display: base role, custom role and effective permissions."""

    member: CompanyMember
    user: User | None
    custom_role: CompanyCustomRole | None
    permissions: frozenset[Permission]
    role_name: str


@dataclass(frozen=True)
class MyMembership:
    company: Company
    view: MembershipView
    is_owner: bool
    is_admin: bool


@dataclass(frozen=True)
class TeamListing:
    members: list[MembershipView]
    pending_invitations: list[CompanyInvitation]


class MemberService:
    def __init__(
        self,
        member_repo: CompanyMemberRepository,
        user_repo: UserRepository,
        company_repo: CompanyRepository,
        custom_role_repo: CompanyCustomRoleRepository,
        invitation_repo: CompanyInvitationRepository,
        permission_service: PermissionService,
        notification_service: NotificationService,
        audit_service: AuditService,
        session: AsyncSession,
    ):
        self.member_repo = member_repo
        self.user_repo = user_repo
        self.company_repo = company_repo
        self.custom_role_repo = custom_role_repo
        self.invitation_repo = invitation_repo
        self.permission_service = permission_service
        self.notification_service = notification_service
        self.audit_service = audit_service
        self.session = session

    async def get_my_membership(self, user: User) -> MyMembership:
        member = await self.member_repo.get_active_by_user(user.id)
        if member is None:
            raise NotFoundError("You are not a member of any company")
        company = await self.company_repo.get_by_id(member.company_id)
        if company is None:
            raise NotFoundError("Company not found")

        view = await self._view(member, user)
        return MyMembership(
            company=company,
            view=view,
            is_owner=is_owner(member),
            is_admin=is_admin_or_owner(member),
        )

    async def list_members(self, company_id: UUID, actor: User) -> TeamListing:
        """Active members plus outstanding invitations. Any active member may look."""
        await self.permission_service.require_member(actor.id, company_id)

        roles = {r.id: r for r in await self.custom_role_repo.list_by_company(company_id)}
        members = [
            self._build_view(member, user, roles.get(member.custom_role_id))
            for member, user in await self.member_repo.list_with_users(company_id)
        ]
        pending = await self.invitation_repo.list_pending(company_id)
        return TeamListing(members=members, pending_invitations=pending)

    async def change_member_role(
        self,
        company_id: UUID,
        member_id: UUID,
        actor: User,
        role: str | None = None,
        custom_role_id: UUID | None = None,
    ) -> CompanyMember:
        """Give a member exactly one base role: a default role or a custom role."""
        actor_member = await self.permission_service.require_permission(
            actor.id, company_id, Permission.CHANGE_ROLES
        )

        try:
            target = await self._get_manageable_target(company_id, member_id, actor_member)
            if target.user_id == actor.id:
                raise ValidationFailedError("You cannot change your own role")

            if (role is None) == (custom_role_id is None):
                raise ValidationFailedError("Specify exactly one of role or custom role")

            custom_role: CompanyCustomRole | None = None
            new_default_role: str | None = None
            if custom_role_id is not None:
                custom_role = await self.custom_role_repo.get_in_company(custom_role_id, company_id)
                if custom_role is None:
                    raise ValidationFailedError("Custom role not found in this company")
            else:
                parsed = parse_role((role or "").upper())
                if parsed is None:
                    raise ValidationFailedError(f"Invalid role: {role}")
                if parsed == DefaultRole.OWNER:
                    raise ValidationFailedError(
                        "The owner role can only be assigned through ownership transfer"
                    )
                new_default_role = parsed.value

            previous = {
                "default_role": target.default_role,
                "custom_role_id": _str_or_none(target.custom_role_id),
            }
            target.default_role = new_default_role
            target.custom_role_id = custom_role.id if custom_role else None
            self.member_repo.add(target)
            await self.session.commit()
            await self.session.refresh(target)

        except ValueError:
            await self.session.rollback()
            raise
        except Exception as e:
            await self.session.rollback()
            logger.error("Failed to change member role", member_id=str(member_id), error=str(e))
            raise

        label = get_role_label(target.default_role, custom_role)
        logger.info(
            "Member role changed",
            member_id=str(member_id),
            company_id=str(company_id),
            changed_by=str(actor.id),
            default_role=target.default_role,
            custom_role_id=_str_or_none(target.custom_role_id),
        )

        company = await self.company_repo.get_by_id(company_id)
        await self.notification_service.notify(
            target.user_id,
            NotificationType.TEAM_ROLE_CHANGED,
            "Role Updated",
            f"Your role in {company.name if company else 'your company'} is now {label}",
            link=TEAM_PAGE_LINK,
        )
        await self.audit_service.log_action(
            company_id,
            AuditAction.MEMBER_ROLE_CHANGE,
            "member",
            entity_id=member_id,
            user_id=actor.id,
            changes={
                "from": previous,
                "to": {
                    "default_role": target.default_role,
                    "custom_role_id": _str_or_none(target.custom_role_id),
                },
            },
        )
        return target

    async def update_extra_permissions(
        self,
        company_id: UUID,
        member_id: UUID,
        actor: User,
        permissions: list[str],
    ) -> CompanyMember:
        """Replace a member's extra permissions. Deleting the company and
        transferring ownership are never delegable."""
        actor_member = await self.permission_service.require_permission(
            actor.id, company_id, Permission.DELEGATE_PERMISSIONS
        )

        try:
            target = await self._get_manageable_target(company_id, member_id, actor_member)
            if target.user_id == actor.id:
                raise ValidationFailedError("You cannot change your own permissions")

            granted = parse_grantable_permissions(permissions)
            previous = list(target.extra_permissions or [])
            target.extra_permissions = [p.value for p in granted]
            self.member_repo.add(target)
            await self.session.commit()
            await self.session.refresh(target)

        except ValueError:
            await self.session.rollback()
            raise
        except Exception as e:
            await self.session.rollback()
            logger.error("Failed to update extra permissions", member_id=str(member_id), error=str(e))
            raise

        logger.info(
            "Member extra permissions updated",
            member_id=str(member_id),
            company_id=str(company_id),
            changed_by=str(actor.id),
            extra_permissions=target.extra_permissions,
        )
        await self.audit_service.log_action(
            company_id,
            AuditAction.MEMBER_PERMISSIONS_UPDATE,
            "member",
            entity_id=member_id,
            user_id=actor.id,
            changes={"from": previous, "to": target.extra_permissions},
        )
        return target

    async def remove_member(self, company_id: UUID, member_id: UUID, actor: User) -> CompanyMember:
        """Mark a member REMOVED. Role and extra permissions stay on the row for audit."""
        actor_member = await self.permission_service.require_permission(
            actor.id, company_id, Permission.REMOVE_MEMBERS
        )

        try:
            target = await self.member_repo.get_in_company(member_id, company_id)
            if target is None or not target.is_active:
                raise NotFoundError("Member not found")
            if is_owner(target):
                raise ConflictError("The company owner cannot be removed")
            if target.user_id == actor.id:
                raise ValidationFailedError("You cannot remove yourself")
            if not can_manage_role(actor_member.default_role, target.default_role):
                raise PermissionDeniedError(message="You cannot manage members with this role")

            target.status = MemberStatus.REMOVED.value
            target.removed_at = utc_now()
            self.member_repo.add(target)
            await self.session.commit()
            await self.session.refresh(target)

        except ValueError:
            await self.session.rollback()
            raise
        except Exception as e:
            await self.session.rollback()
            logger.error("Failed to remove member", member_id=str(member_id), error=str(e))
            raise

        logger.info(
            "Member removed",
            member_id=str(member_id),
            company_id=str(company_id),
            removed_by=str(actor.id),
        )

        company = await self.company_repo.get_by_id(company_id)
        await self.notification_service.notify(
            target.user_id,
            NotificationType.TEAM_MEMBER_REMOVED,
            "Removed From Team",
            f"You have been removed from {company.name if company else 'the company'} team",
        )
        await self.audit_service.log_action(
            company_id,
            AuditAction.MEMBER_REMOVE,
            "member",
            entity_id=member_id,
            user_id=actor.id,
        )
        return target

    async def transfer_ownership(
        self, company_id: UUID, new_owner_member_id: UUID, actor: User
    ) -> CompanyMember:
        """Swap OWNER to another active member in one transaction.

        The previous owner becomes ADMIN. The account-level COMPANY tag moves
        with ownership; the previous owner's account becomes TEAM_MEMBER.
        """
        current_owner = await self.permission_service.require_permission(
            actor.id, company_id, Permission.TRANSFER_OWNERSHIP
        )

        try:
            company = await self.company_repo.get_for_update(company_id)
            if company is None:
                raise NotFoundError("Company not found")
            if not is_owner(current_owner):
                raise PermissionDeniedError(Permission.TRANSFER_OWNERSHIP.value)

            target = await self.member_repo.get_in_company(new_owner_member_id, company_id)
            if target is None or not target.is_active:
                raise NotFoundError("Member not found")
            if target.id == current_owner.id:
                raise ValidationFailedError("You already own this company")

            current_owner.default_role = DefaultRole.ADMIN.value
            current_owner.custom_role_id = None
            target.default_role = DefaultRole.OWNER.value
            target.custom_role_id = None
            target.extra_permissions = []
            company.owner_id = target.user_id
            company.updated_at = utc_now()
            self.member_repo.add(current_owner)
            self.member_repo.add(target)
            self.company_repo.add(company)

            new_owner_user = await self.user_repo.get_by_id(target.user_id)
            if new_owner_user is not None:
                new_owner_user.role = UserRole.COMPANY.value
                self.user_repo.add(new_owner_user)
            actor.role = UserRole.TEAM_MEMBER.value
            self.user_repo.add(actor)

            await self.session.commit()
            await self.session.refresh(target)

        except ValueError:
            await self.session.rollback()
            raise
        except Exception as e:
            await self.session.rollback()
            logger.error("Failed to transfer ownership", company_id=str(company_id), error=str(e))
            raise

        logger.info(
            "Ownership transferred",
            company_id=str(company_id),
            previous_owner_member_id=str(current_owner.id),
            new_owner_member_id=str(target.id),
        )
        await self.notification_service.notify(
            target.user_id,
            NotificationType.OWNERSHIP_TRANSFERRED,
            "Ownership Transferred",
            f"You are now the owner of {company.name}",
            link=TEAM_PAGE_LINK,
        )
        await self.audit_service.log_action(
            company_id,
            AuditAction.OWNERSHIP_TRANSFER,
            "company",
            entity_id=company_id,
            user_id=actor.id,
            changes={
                "previous_owner_member_id": str(current_owner.id),
                "new_owner_member_id": str(target.id),
            },
        )
        return target

    async def _get_manageable_target(
        self, company_id: UUID, member_id: UUID, actor_member: CompanyMember
    ) -> CompanyMember:
        target = await self.member_repo.get_in_company(member_id, company_id)
        if target is None or not target.is_active:
            raise NotFoundError("Member not found")
        if not can_manage_role(actor_member.default_role, target.default_role):
            raise PermissionDeniedError(message="You cannot manage members with this role")
        return target

    async def describe(self, member: CompanyMember) -> MembershipView:
        """Resolve a member's user, custom role and effective permissions."""
        user = await self.user_repo.get_by_id(member.user_id)
        return await self._view(member, user)

    async def _view(self, member: CompanyMember, user: User | None) -> MembershipView:
        custom_role = await self.permission_service.get_custom_role(member)
        return self._build_view(member, user, custom_role)

    @staticmethod
    def _build_view(
        member: CompanyMember, user: User | None, custom_role: CompanyCustomRole | None
    ) -> MembershipView:
        return MembershipView(
            member=member,
            user=user,
            custom_role=custom_role,
            permissions=effective_permissions(member, custom_role),
            role_name=get_role_display_name(member, custom_role),
        )


def _str_or_none(value: UUID | None) -> str | None:
    return str(value) if value is not None else None
