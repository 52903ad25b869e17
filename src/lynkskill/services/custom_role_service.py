"""Company-scoped custom roles."""

from typing import Any
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.lynkskill.core.exceptions import ConflictError, NotFoundError, ValidationFailedError
from src.lynkskill.core.logging import get_logger
from src.lynkskill.core.permissions import parse_grantable_permissions
from src.lynkskill.models.audit import AuditAction
from src.lynkskill.models.base import utc_now
from src.lynkskill.models.custom_role import CompanyCustomRole
from src.lynkskill.models.enums import Permission
from src.lynkskill.models.user import User
from src.lynkskill.repositories import (
    CompanyCustomRoleRepository,
    CompanyInvitationRepository,
    CompanyMemberRepository,
)
from src.lynkskill.services.audit_service import AuditService
from src.lynkskill.services.permission_service import PermissionService

logger = get_logger(__name__)

_UPDATABLE_FIELDS = frozenset({"name", "color", "permissions"})


class CustomRoleService:
    """CRUD for custom roles. Every operation requires CHANGE_ROLES.

    A role still referenced by a member or an outstanding invitation cannot
    be deleted.
    """

    def __init__(
        self,
        custom_role_repo: CompanyCustomRoleRepository,
        member_repo: CompanyMemberRepository,
        invitation_repo: CompanyInvitationRepository,
        permission_service: PermissionService,
        audit_service: AuditService,
        session: AsyncSession,
    ):
        self.custom_role_repo = custom_role_repo
        self.member_repo = member_repo
        self.invitation_repo = invitation_repo
        self.permission_service = permission_service
        self.audit_service = audit_service
        self.session = session

    async def list_roles(self, company_id: UUID, actor: User) -> list[CompanyCustomRole]:
        await self.permission_service.require_permission(
            actor.id, company_id, Permission.CHANGE_ROLES
        )
        return await self.custom_role_repo.list_by_company(company_id)

    async def create_role(
        self,
        company_id: UUID,
        actor: User,
        name: str,
        permissions: list[str],
        color: str | None = None,
    ) -> CompanyCustomRole:
        await self.permission_service.require_permission(
            actor.id, company_id, Permission.CHANGE_ROLES
        )

        try:
            name = _clean_name(name)
            granted = parse_grantable_permissions(permissions)
            if await self.custom_role_repo.get_by_name(company_id, name) is not None:
                raise ConflictError(f"A role named '{name}' already exists")

            role = CompanyCustomRole(
                company_id=company_id,
                name=name,
                color=color,
                permissions=[p.value for p in granted],
            )
            self.custom_role_repo.add(role)
            await self.session.commit()
            await self.session.refresh(role)

        except ValueError:
            await self.session.rollback()
            raise
        except IntegrityError as e:
            await self.session.rollback()
            raise ConflictError(f"A role named '{name}' already exists") from e
        except Exception as e:
            await self.session.rollback()
            logger.error("Failed to create custom role", company_id=str(company_id), error=str(e))
            raise

        logger.info("Custom role created", role_id=str(role.id), company_id=str(company_id))
        await self.audit_service.log_action(
            company_id,
            AuditAction.CUSTOM_ROLE_CREATE,
            "custom_role",
            entity_id=role.id,
            user_id=actor.id,
            changes={"name": role.name, "permissions": role.permissions},
        )
        return role

    async def update_role(
        self,
        company_id: UUID,
        role_id: UUID,
        actor: User,
        updates: dict[str, Any],
    ) -> CompanyCustomRole:
        """Apply only the supplied fields (name, color, permissions)."""
        await self.permission_service.require_permission(
            actor.id, company_id, Permission.CHANGE_ROLES
        )
        unknown = set(updates) - _UPDATABLE_FIELDS
        if unknown:
            raise ValidationFailedError(f"Unknown fields: {', '.join(sorted(unknown))}")

        try:
            role = await self._get_role(company_id, role_id)
            changes: dict[str, Any] = {}

            if "name" in updates:
                name = _clean_name(updates["name"])
                existing = await self.custom_role_repo.get_by_name(company_id, name)
                if existing is not None and existing.id != role.id:
                    raise ConflictError(f"A role named '{name}' already exists")
                role.name = name
                changes["name"] = name

            if "color" in updates:
                role.color = updates["color"]
                changes["color"] = role.color

            if "permissions" in updates:
                if updates["permissions"] is None:
                    raise ValidationFailedError("permissions cannot be null")
                granted = parse_grantable_permissions(updates["permissions"])
                role.permissions = [p.value for p in granted]
                changes["permissions"] = role.permissions

            role.updated_at = utc_now()
            self.custom_role_repo.add(role)
            await self.session.commit()
            await self.session.refresh(role)

        except ValueError:
            await self.session.rollback()
            raise
        except IntegrityError as e:
            await self.session.rollback()
            raise ConflictError("A role with this name already exists") from e
        except Exception as e:
            await self.session.rollback()
            logger.error("Failed to update custom role", role_id=str(role_id), error=str(e))
            raise

        logger.info("Custom role updated", role_id=str(role_id), company_id=str(company_id))
        await self.audit_service.log_action(
            company_id,
            AuditAction.CUSTOM_ROLE_UPDATE,
            "custom_role",
            entity_id=role_id,
            user_id=actor.id,
            changes=changes,
        )
        return role

    async def delete_role(self, company_id: UUID, role_id: UUID, actor: User) -> None:
        await self.permission_service.require_permission(
            actor.id, company_id, Permission.CHANGE_ROLES
        )

        try:
            role = await self._get_role(company_id, role_id)

            members = await self.member_repo.count_by_custom_role(role_id)
            invitations = await self.invitation_repo.count_pending_by_custom_role(role_id)
            if members or invitations:
                raise ConflictError(
                    f"Role is still assigned to {members} member(s) and "
                    f"{invitations} pending invitation(s). Reassign them first."
                )

            await self.custom_role_repo.delete(role)
            await self.session.commit()

        except ValueError:
            await self.session.rollback()
            raise
        except Exception as e:
            await self.session.rollback()
            logger.error("Failed to delete custom role", role_id=str(role_id), error=str(e))
            raise

        logger.info("Custom role deleted", role_id=str(role_id), company_id=str(company_id))
        await self.audit_service.log_action(
            company_id,
            AuditAction.CUSTOM_ROLE_DELETE,
            "custom_role",
            entity_id=role_id,
            user_id=actor.id,
        )

    async def _get_role(self, company_id: UUID, role_id: UUID) -> CompanyCustomRole:
        role = await self.custom_role_repo.get_in_company(role_id, company_id)
        if role is None:
            raise NotFoundError("Custom role not found")
        return role


def _clean_name(name: str | None) -> str:
    cleaned = (name or "").strip()
    if not cleaned:
        raise ValidationFailedError("Role name is required")
    if len(cleaned) > 50:
        raise ValidationFailedError("Role name must be at most 50 characters")
    return cleaned
