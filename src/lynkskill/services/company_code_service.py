"""Shared company code: settings, regeneration and self-service joins."""

from datetime import UTC, datetime, timedelta
from typing import Any
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.lynkskill.core.company_code import (
    generate_code,
    get_time_until_expiry,
    is_code_expired,
    is_valid_code_format,
    mask_code,
    normalize_code,
    regeneration_wait_seconds,
)
from src.lynkskill.core.config import get_settings
from src.lynkskill.core.exceptions import (
    ConflictError,
    NotFoundError,
    PermissionDeniedError,
    RateLimitedError,
    ValidationFailedError,
)
from src.lynkskill.core.logging import get_logger
from src.lynkskill.models.audit import AuditAction
from src.lynkskill.models.base import utc_now
from src.lynkskill.models.company import Company
from src.lynkskill.models.enums import (
    DefaultRole,
    MemberStatus,
    NotificationType,
    Permission,
    UserRole,
)
from src.lynkskill.models.member import CompanyMember
from src.lynkskill.models.user import User
from src.lynkskill.repositories import (
    CompanyMemberRepository,
    CompanyRepository,
    UserRepository,
)
from src.lynkskill.services.audit_service import AuditService
from src.lynkskill.services.notification_service import NotificationService
from src.lynkskill.services.permission_service import PermissionService

logger = get_logger(__name__)

PREVIEW_DESCRIPTION_LENGTH = 200
_MAX_CODE_ATTEMPTS = 5
_UPDATABLE_SETTINGS = frozenset({"enabled", "expires_at", "max_team_members"})


class CompanyCodeService:
    """Company code lifecycle.

    A join locks the company row before counting members, so two joiners
    cannot both take the last seat under the team-size ceiling.
    """

    def __init__(
        self,
        company_repo: CompanyRepository,
        member_repo: CompanyMemberRepository,
        user_repo: UserRepository,
        permission_service: PermissionService,
        notification_service: NotificationService,
        audit_service: AuditService,
        session: AsyncSession,
    ):
        self.company_repo = company_repo
        self.member_repo = member_repo
        self.user_repo = user_repo
        self.permission_service = permission_service
        self.notification_service = notification_service
        self.audit_service = audit_service
        self.session = session

    async def get_code_settings(self, company_id: UUID, actor: User) -> dict[str, Any]:
        """Current code and its limits. A company without a code gets one here."""
        await self.permission_service.require_permission(
            actor.id, company_id, Permission.MANAGE_MEMBERS
        )
        company = await self._get_company(company_id)

        if company.invitation_code is None:
            try:
                company.invitation_code = await self._new_unique_code()
                self.company_repo.add(company)
                await self.session.commit()
                await self.session.refresh(company)
            except Exception as e:
                await self.session.rollback()
                logger.error("Failed to assign company code", company_id=str(company_id), error=str(e))
                raise
            logger.info(
                "Company code assigned",
                company_id=str(company_id),
                masked_code=mask_code(company.invitation_code),
            )

        current_members = await self.member_repo.count_active(company_id)
        return self._settings_view(company, current_members)

    async def regenerate_code(self, company_id: UUID, actor: User) -> dict[str, Any]:
        """Replace the code. The old code stops working the moment this commits.

        Raises:
            RateLimitedError: Within the cooldown; carries the whole seconds left.
        """
        await self.permission_service.require_permission(
            actor.id, company_id, Permission.MANAGE_MEMBERS
        )
        cooldown = timedelta(seconds=get_settings().code_regen_cooldown_seconds)

        try:
            company = await self.company_repo.get_for_update(company_id)
            if company is None:
                raise NotFoundError("Company not found")

            wait = regeneration_wait_seconds(company.last_code_regen_at, cooldown=cooldown)
            if wait > 0:
                raise RateLimitedError(wait)

            previous = company.invitation_code
            company.invitation_code = await self._new_unique_code()
            company.code_usage_count = 0
            company.last_code_regen_at = utc_now()
            company.updated_at = company.last_code_regen_at
            self.company_repo.add(company)
            await self.session.commit()
            await self.session.refresh(company)

        except ValueError:
            await self.session.rollback()
            raise
        except Exception as e:
            await self.session.rollback()
            logger.error("Failed to regenerate company code", company_id=str(company_id), error=str(e))
            raise

        logger.info(
            "Company code regenerated",
            company_id=str(company_id),
            regenerated_by=str(actor.id),
            masked_code=mask_code(company.invitation_code),
        )
        await self.audit_service.log_action(
            company_id,
            AuditAction.CODE_REGENERATE,
            "company",
            entity_id=company_id,
            user_id=actor.id,
            changes={
                "previous": mask_code(previous),
                "current": mask_code(company.invitation_code),
            },
        )

        current_members = await self.member_repo.count_active(company_id)
        return self._settings_view(company, current_members)

    async def update_code_settings(
        self, company_id: UUID, actor: User, updates: dict[str, Any]
    ) -> dict[str, Any]:
        """Change only the supplied settings. ``None`` clears expiry or the ceiling."""
        await self.permission_service.require_permission(
            actor.id, company_id, Permission.MANAGE_MEMBERS
        )

        unknown = set(updates) - _UPDATABLE_SETTINGS
        if unknown:
            raise ValidationFailedError(f"Unknown settings: {', '.join(sorted(unknown))}")

        try:
            company = await self._get_company(company_id)
            changes: dict[str, Any] = {}

            if "enabled" in updates:
                if updates["enabled"] is None:
                    raise ValidationFailedError("enabled cannot be null")
                company.code_enabled = bool(updates["enabled"])
                changes["enabled"] = company.code_enabled

            if "expires_at" in updates:
                expires_at: datetime | None = updates["expires_at"]
                if expires_at is not None:
                    if expires_at.tzinfo is not None:
                        expires_at = expires_at.astimezone(UTC).replace(tzinfo=None)
                    if expires_at <= utc_now():
                        raise ValidationFailedError("Expiry must be in the future")
                company.code_expires_at = expires_at
                changes["expires_at"] = expires_at.isoformat() if expires_at else None

            if "max_team_members" in updates:
                max_members = updates["max_team_members"]
                if max_members is not None and max_members < 1:
                    raise ValidationFailedError("Maximum team size must be at least 1")
                company.max_team_members = max_members
                changes["max_team_members"] = max_members

            company.updated_at = utc_now()
            self.company_repo.add(company)
            await self.session.commit()
            await self.session.refresh(company)

        except ValueError:
            await self.session.rollback()
            raise
        except Exception as e:
            await self.session.rollback()
            logger.error("Failed to update code settings", company_id=str(company_id), error=str(e))
            raise

        logger.info("Company code settings updated", company_id=str(company_id), **changes)
        await self.audit_service.log_action(
            company_id,
            AuditAction.CODE_SETTINGS_UPDATE,
            "company",
            entity_id=company_id,
            user_id=actor.id,
            changes=changes,
        )

        current_members = await self.member_repo.count_active(company_id)
        return self._settings_view(company, current_members)

    async def preview_code(self, code: str, user: User) -> dict[str, Any]:
        """Run every join check without joining and describe the company."""
        company, member_count = await self._check_join(code, user, lock=False)
        description = company.description
        if description and len(description) > PREVIEW_DESCRIPTION_LENGTH:
            description = description[:PREVIEW_DESCRIPTION_LENGTH] + "..."
        return {
            "id": company.id,
            "name": company.name,
            "logo_url": company.logo_url,
            "location": company.location,
            "description": description,
            "member_count": member_count,
        }

    async def join_via_code(self, code: str, user: User) -> CompanyMember:
        """Join the company owning ``code`` with the MEMBER role."""
        try:
            company, _ = await self._check_join(code, user, lock=True)

            now = utc_now()
            member = CompanyMember(
                user_id=user.id,
                company_id=company.id,
                default_role=DefaultRole.MEMBER.value,
                status=MemberStatus.ACTIVE.value,
                joined_via_code=True,
                joined_at=now,
            )
            self.member_repo.add(member)

            company.code_usage_count += 1
            self.company_repo.add(company)

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
            await self.session.rollback()
            raise ConflictError("You are already a member of a company") from e
        except Exception as e:
            await self.session.rollback()
            logger.error("Failed to join via company code", user_id=str(user.id), error=str(e))
            raise

        logger.info(
            "Member joined via code",
            member_id=str(member.id),
            company_id=str(company.id),
            user_id=str(user.id),
            masked_code=mask_code(code),
        )

        await self.notification_service.notify(
            company.owner_id,
            NotificationType.TEAM_MEMBER_JOINED,
            "New Team Member",
            f"{user.display_name} joined your team using the company code",
            link="/dashboard/company/team",
        )
        await self.audit_service.log_action(
            company.id,
            AuditAction.CODE_JOIN,
            "member",
            entity_id=member.id,
            user_id=user.id,
        )
        return member

    async def list_code_joins(
        self,
        company_id: UUID,
        actor: User,
        cursor: str | None = None,
        limit: int = 20,
    ) -> tuple[list[tuple[CompanyMember, User | None]], str | None, bool]:
        """Members who joined with the code, newest first, paired with their users."""
        await self.permission_service.require_permission(
            actor.id, company_id, Permission.MANAGE_MEMBERS
        )
        members, next_cursor, has_more = await self.member_repo.list_code_joins_paginated(
            company_id, cursor, limit
        )
        users = await self.user_repo.get_by_ids([m.user_id for m in members])
        return [(m, users.get(m.user_id)) for m in members], next_cursor, has_more

    async def _check_join(self, code: str, user: User, lock: bool) -> tuple[Company, int]:
        """Checks shared by preview and join. Returns the company and its active member count."""
        if not is_valid_code_format(code):
            raise ValidationFailedError("Invalid code format. Expected: XXXX-XXXX-XXXX-XXXX")

        if user.role == UserRole.STUDENT.value:
            raise PermissionDeniedError(message="Students cannot join company teams")
        if user.role == UserRole.COMPANY.value:
            raise PermissionDeniedError(message="Company owners cannot join other companies")
        if await self.member_repo.get_active_by_user(user.id) is not None:
            raise ConflictError("You are already a member of a company")

        company = await self.company_repo.get_by_code(normalize_code(code), for_update=lock)
        if company is None:
            raise NotFoundError("Invalid company code. Please check and try again.")
        if not company.code_enabled:
            raise ConflictError("This company code has been disabled")
        if is_code_expired(company.code_expires_at):
            raise ConflictError("This company code has expired")

        member_count = await self.member_repo.count_active(company.id)
        if company.max_team_members is not None and member_count >= company.max_team_members:
            raise ConflictError("This company has reached its maximum team size")

        return company, member_count

    async def _get_company(self, company_id: UUID) -> Company:
        company = await self.company_repo.get_by_id(company_id)
        if company is None:
            raise NotFoundError("Company not found")
        return company

    async def _new_unique_code(self) -> str:
        for _ in range(_MAX_CODE_ATTEMPTS):
            code = generate_code()
            if not await self.company_repo.code_exists(code):
                return code
        raise RuntimeError("Could not generate a unique company code")

    def _settings_view(self, company: Company, current_members: int) -> dict[str, Any]:
        cooldown = timedelta(seconds=get_settings().code_regen_cooldown_seconds)
        can_regenerate_at = (
            company.last_code_regen_at + cooldown if company.last_code_regen_at else None
        )
        return {
            "code": company.invitation_code,
            "masked_code": mask_code(company.invitation_code),
            "enabled": company.code_enabled,
            "expires_at": company.code_expires_at,
            "is_expired": is_code_expired(company.code_expires_at),
            "time_until_expiry": get_time_until_expiry(company.code_expires_at),
            "max_team_members": company.max_team_members,
            "current_members": current_members,
            "usage_count": company.code_usage_count,
            "last_regenerated_at": company.last_code_regen_at,
            "can_regenerate_at": can_regenerate_at,
        }
