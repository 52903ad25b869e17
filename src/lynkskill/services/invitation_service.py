"""Company team invitation service."""

import asyncio
from datetime import timedelta
from typing import Any
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.lynkskill.core.config import get_settings
from src.lynkskill.core.exceptions import (
    ConflictError,
    NotFoundError,
    PermissionDeniedError,
    ValidationFailedError,
)
from src.lynkskill.core.logging import get_logger
from src.lynkskill.core.notifications import send_invitation_email
from src.lynkskill.core.permissions import get_role_label, parse_role
from src.lynkskill.core.security import generate_invitation_token, hash_token
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


class InvitationService:
    """Emailed, single-use invitations into a company team.

    State changes commit before any email or notification goes out, and a
    failing side effect never undoes them.
    """

    def __init__(
        self,
        invitation_repo: CompanyInvitationRepository,
        member_repo: CompanyMemberRepository,
        user_repo: UserRepository,
        company_repo: CompanyRepository,
        custom_role_repo: CompanyCustomRoleRepository,
        permission_service: PermissionService,
        notification_service: NotificationService,
        audit_service: AuditService,
        session: AsyncSession,
    ):
        self.invitation_repo = invitation_repo
        self.member_repo = member_repo
        self.user_repo = user_repo
        self.company_repo = company_repo
        self.custom_role_repo = custom_role_repo
        self.permission_service = permission_service
        self.notification_service = notification_service
        self.audit_service = audit_service
        self.session = session

    async def create_invitation(
        self,
        company_id: UUID,
        actor: User,
        email: str,
        role: str | None = None,
        custom_role_id: UUID | None = None,
    ) -> tuple[CompanyInvitation, str]:
        """Create an invitation and send it.

        Returns (invitation, plaintext_token). Only the token hash is stored.
        """
        await self.permission_service.require_permission(
            actor.id, company_id, Permission.INVITE_MEMBERS
        )
        email = email.strip().lower()
        settings = get_settings()

        try:
            invited_role, custom_role = await self._resolve_invited_role(
                company_id, role, custom_role_id
            )

            invitee = await self.user_repo.get_by_email(email)
            if invitee is not None:
                if await self.member_repo.get_active_by_user(invitee.id) is not None:
                    raise ConflictError("This user is already a member of a company")
                if invitee.role == UserRole.STUDENT.value:
                    raise ConflictError("Student accounts cannot be invited to a company team")
                if invitee.role == UserRole.COMPANY.value:
                    raise ConflictError("Company owners cannot be invited to another company")

            if await self.invitation_repo.get_outstanding_for_email(email, company_id):
                raise ConflictError("An invitation has already been sent to this email")

            token = generate_invitation_token()
            invitation = CompanyInvitation(
                company_id=company_id,
                email=email,
                token_hash=hash_token(token),
                role=invited_role.value,
                custom_role_id=custom_role.id if custom_role else None,
                invited_by_user_id=actor.id,
                expires_at=utc_now() + timedelta(days=settings.invite_expire_days),
            )
            self.invitation_repo.add(invitation)
            await self.session.commit()
            await self.session.refresh(invitation)

        except ValueError:
            await self.session.rollback()
            raise
        except Exception as e:
            await self.session.rollback()
            logger.error("Failed to create invitation", company_id=str(company_id), error=str(e))
            raise

        logger.info(
            "Invitation created",
            invitation_id=str(invitation.id),
            company_id=str(company_id),
            invited_by=str(actor.id),
            role=invitation.role,
            custom_role_id=str(invitation.custom_role_id) if invitation.custom_role_id else None,
        )

        await self._deliver(invitation, token, actor, invitee, custom_role)
        await self.audit_service.log_action(
            company_id,
            AuditAction.INVITATION_CREATE,
            "invitation",
            entity_id=invitation.id,
            user_id=actor.id,
            changes={"role": invitation.role, "custom_role_id": _str_or_none(custom_role_id)},
        )
        return invitation, token

    async def get_invitation_info(self, token: str) -> dict[str, Any]:
        """Public preview of an invitation, shown before the invitee decides."""
        invitation = await self._get_open_invitation(token)
        company = await self.company_repo.get_by_id(invitation.company_id)
        inviter = await self.user_repo.get_by_id(invitation.invited_by_user_id)
        custom_role = await self._get_custom_role(invitation)

        return {
            "email": invitation.email,
            "company_id": invitation.company_id,
            "company_name": company.name if company else "Unknown",
            "company_logo_url": company.logo_url if company else None,
            "role": None if custom_role else invitation.role,
            "role_label": get_role_label(invitation.role, custom_role),
            "custom_role_id": invitation.custom_role_id,
            "inviter_name": inviter.display_name if inviter else "A team member",
            "expires_at": invitation.expires_at,
        }

    async def accept_invitation(self, token: str, user: User) -> CompanyMember:
        """Accept an invitation as the signed-in user.

        Marking the invitation accepted, creating the member and promoting
        the account commit together. The accepted flag is set with a
        conditional UPDATE, so a concurrent second acceptance finds zero
        rows and is rejected.
        """
        try:
            invitation = await self.invitation_repo.get_by_hash(hash_token(token))
            if invitation is None:
                raise NotFoundError("Invitation not found")
            if invitation.is_accepted:
                raise ConflictError("Invitation has already been accepted")
            if invitation.is_expired():
                raise ConflictError("Invitation has expired")
            if invitation.email.lower() != user.email.lower():
                raise PermissionDeniedError(
                    message="This invitation was sent to a different email address"
                )
            if await self.member_repo.get_active_by_user(user.id) is not None:
                raise ConflictError("You are already a member of a company")

            if not await self.invitation_repo.mark_accepted(invitation):
                raise ConflictError("Invitation has already been accepted")

            inviter = await self.user_repo.get_by_id(invitation.invited_by_user_id)
            now = utc_now()
            member = CompanyMember(
                user_id=user.id,
                company_id=invitation.company_id,
                default_role=None if invitation.custom_role_id else invitation.role,
                custom_role_id=invitation.custom_role_id,
                status=MemberStatus.ACTIVE.value,
                invited_by_user_id=invitation.invited_by_user_id,
                invited_by_email=inviter.email if inviter else None,
                invited_at=invitation.created_at,
                joined_at=now,
            )
            self.member_repo.add(member)

            if not user.is_company_type:
                user.role = UserRole.TEAM_MEMBER.value
                user.updated_at = now
                self.user_repo.add(user)

            await self.session.commit()
            await self.session.refresh(member)

        except ValueError:
            await self.session.rollback()
            raise
        except IntegrityError as e:
            # Partial unique index on active memberships lost a race
            await self.session.rollback()
            raise ConflictError("You are already a member of a company") from e
        except Exception as e:
            await self.session.rollback()
            logger.error("Failed to accept invitation", error=str(e))
            raise

        logger.info(
            "Invitation accepted",
            invitation_id=str(invitation.id),
            member_id=str(member.id),
            company_id=str(member.company_id),
            user_id=str(user.id),
        )

        await self.notification_service.notify(
            invitation.invited_by_user_id,
            NotificationType.TEAM_INVITATION_ACCEPTED,
            "Invitation Accepted",
            f"{user.display_name} has joined your team",
            link=TEAM_PAGE_LINK,
        )
        await self.audit_service.log_action(
            member.company_id,
            AuditAction.INVITATION_ACCEPT,
            "invitation",
            entity_id=invitation.id,
            user_id=user.id,
            changes={"member_id": str(member.id)},
        )
        return member

    async def decline_invitation(self, token: str, user: User) -> None:
        """Decline an invitation. The row is deleted, so the token dies with it."""
        try:
            invitation = await self.invitation_repo.get_by_hash(hash_token(token))
            if invitation is None:
                raise NotFoundError("Invitation not found")
            if invitation.is_accepted:
                raise ConflictError("Invitation has already been accepted")
            if invitation.email.lower() != user.email.lower():
                raise PermissionDeniedError(
                    message="This invitation was sent to a different email address"
                )

            invitation_id = invitation.id
            company_id = invitation.company_id
            await self.invitation_repo.delete(invitation)
            await self.session.commit()

        except ValueError:
            await self.session.rollback()
            raise
        except Exception as e:
            await self.session.rollback()
            logger.error("Failed to decline invitation", error=str(e))
            raise

        logger.info("Invitation declined", invitation_id=str(invitation_id), user_id=str(user.id))
        await self.audit_service.log_action(
            company_id,
            AuditAction.INVITATION_DECLINE,
            "invitation",
            entity_id=invitation_id,
            user_id=user.id,
        )

    async def resend_invitation(
        self, company_id: UUID, invitation_id: UUID, actor: User
    ) -> tuple[CompanyInvitation, str]:
        """Issue a fresh token and expiry for a pending invitation and send it again.

        The previous token stops resolving as soon as this commits.
        """
        await self.permission_service.require_permission(
            actor.id, company_id, Permission.INVITE_MEMBERS
        )
        settings = get_settings()

        try:
            invitation = await self.invitation_repo.get_in_company(invitation_id, company_id)
            if invitation is None:
                raise NotFoundError("Invitation not found")
            if invitation.is_accepted:
                raise ConflictError("Invitation has already been accepted")

            token = generate_invitation_token()
            invitation.token_hash = hash_token(token)
            invitation.expires_at = utc_now() + timedelta(days=settings.invite_expire_days)
            self.invitation_repo.add(invitation)
            await self.session.commit()
            await self.session.refresh(invitation)

        except ValueError:
            await self.session.rollback()
            raise
        except Exception as e:
            await self.session.rollback()
            logger.error("Failed to resend invitation", invitation_id=str(invitation_id), error=str(e))
            raise

        logger.info(
            "Invitation resent",
            invitation_id=str(invitation.id),
            company_id=str(company_id),
            resent_by=str(actor.id),
        )

        invitee = await self.user_repo.get_by_email(invitation.email)
        custom_role = await self._get_custom_role(invitation)
        await self._deliver(invitation, token, actor, invitee, custom_role, resent=True)
        await self.audit_service.log_action(
            company_id,
            AuditAction.INVITATION_RESEND,
            "invitation",
            entity_id=invitation.id,
            user_id=actor.id,
        )
        return invitation, token

    async def cancel_invitation(self, company_id: UUID, invitation_id: UUID, actor: User) -> None:
        await self.permission_service.require_permission(
            actor.id, company_id, Permission.INVITE_MEMBERS
        )

        try:
            invitation = await self.invitation_repo.get_in_company(invitation_id, company_id)
            if invitation is None:
                raise NotFoundError("Invitation not found")
            if invitation.is_accepted:
                raise ConflictError("Invitation has already been accepted")

            await self.invitation_repo.delete(invitation)
            await self.session.commit()

        except ValueError:
            await self.session.rollback()
            raise
        except Exception as e:
            await self.session.rollback()
            logger.error("Failed to cancel invitation", invitation_id=str(invitation_id), error=str(e))
            raise

        logger.info("Invitation cancelled", invitation_id=str(invitation_id), cancelled_by=str(actor.id))
        await self.audit_service.log_action(
            company_id,
            AuditAction.INVITATION_CANCEL,
            "invitation",
            entity_id=invitation_id,
            user_id=actor.id,
        )

    async def list_pending_invitations(
        self, company_id: UUID, actor: User
    ) -> list[CompanyInvitation]:
        """Unaccepted invitations of the company, expired ones included."""
        await self.permission_service.require_permission(
            actor.id, company_id, Permission.INVITE_MEMBERS
        )
        return await self.invitation_repo.list_pending(company_id)

    async def _resolve_invited_role(
        self,
        company_id: UUID,
        role: str | None,
        custom_role_id: UUID | None,
    ) -> tuple[DefaultRole, CompanyCustomRole | None]:
        """Validate the requested role. Defaults to VIEWER when nothing is given.

        With a custom role, the stored default role is only a placeholder;
        acceptance uses the custom role.
        """
        if role is not None and custom_role_id is not None:
            raise ValidationFailedError("Specify either a role or a custom role, not both")

        if custom_role_id is not None:
            custom_role = await self.custom_role_repo.get_in_company(custom_role_id, company_id)
            if custom_role is None:
                raise ValidationFailedError("Custom role not found in this company")
            return DefaultRole.VIEWER, custom_role

        if role is None:
            return DefaultRole.VIEWER, None

        parsed = parse_role(role.upper())
        if parsed is None:
            raise ValidationFailedError(f"Invalid role: {role}")
        if parsed == DefaultRole.OWNER:
            raise ValidationFailedError(
                "Cannot invite someone as owner. Use ownership transfer instead."
            )
        return parsed, None

    async def _get_open_invitation(self, token: str) -> CompanyInvitation:
        invitation = await self.invitation_repo.get_by_hash(hash_token(token))
        if invitation is None:
            raise NotFoundError("Invitation not found")
        if invitation.is_accepted:
            raise ConflictError("Invitation has already been accepted")
        if invitation.is_expired():
            raise ConflictError("Invitation has expired")
        return invitation

    async def _get_custom_role(self, invitation: CompanyInvitation) -> CompanyCustomRole | None:
        if invitation.custom_role_id is None:
            return None
        return await self.custom_role_repo.get_in_company(
            invitation.custom_role_id, invitation.company_id
        )

    async def _deliver(
        self,
        invitation: CompanyInvitation,
        token: str,
        inviter: User,
        invitee: User | None,
        custom_role: CompanyCustomRole | None,
        resent: bool = False,
    ) -> None:
        """Send the email and, when the invitee has an account, an in-app notification."""
        company: Company | None = None
        try:
            company = await self.company_repo.get_by_id(invitation.company_id)
        except Exception as e:
            logger.warning("Could not load company for invitation email", error=str(e))

        company_name = company.name if company else "a company"
        role_label = get_role_label(invitation.role, custom_role)

        # Blocking SDK call; keep it off the event loop
        sent = await asyncio.to_thread(
            send_invitation_email,
            to=invitation.email,
            token=token,
            company_name=company_name,
            inviter_name=inviter.display_name,
            role_label=role_label,
            expires_at=invitation.expires_at,
        )
        if not sent:
            logger.warning("Invitation email failed", invitation_id=str(invitation.id))

        if invitee is not None:
            title = "Company Team Invitation (Resent)" if resent else "Company Team Invitation"
            await self.notification_service.notify(
                invitee.id,
                NotificationType.TEAM_INVITATION,
                title,
                f"{inviter.display_name} invited you to join {company_name} as {role_label}",
                link=f"/invitations?token={token}",
            )


def _str_or_none(value: UUID | None) -> str | None:
    return str(value) if value is not None else None
