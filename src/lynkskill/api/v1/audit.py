"""Audit log endpoints - company managers only."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Query

from src.lynkskill.api.dependencies import (
    AuditServiceDep,
    CurrentMembership,
    CurrentUser,
    PermissionServiceDep,
)
from src.lynkskill.models.enums import Permission
from src.lynkskill.schemas.audit import AuditLogListResponse, AuditLogRead

router = APIRouter(prefix="/company/audit-logs", tags=["audit"])

# Query parameter types
CursorQuery = Annotated[str | None, Query(description="Pagination cursor")]
LimitQuery = Annotated[int, Query(ge=1, le=100, description="Items per page")]
ActionQuery = Annotated[str | None, Query(description="Filter by action type")]
UserIdQuery = Annotated[UUID | None, Query(description="Filter by user ID")]


@router.get(
    "",
    response_model=AuditLogListResponse,
    responses={403: {"description": "MANAGE_MEMBERS required"}},
)
async def list_audit_logs(
    user: CurrentUser,
    membership: CurrentMembership,
    permission_service: PermissionServiceDep,
    audit_service: AuditServiceDep,
    cursor: CursorQuery = None,
    limit: LimitQuery = 50,
    action: ActionQuery = None,
    user_id: UserIdQuery = None,
) -> AuditLogListResponse:
    """List audit logs of the caller's company, newest first."""
    await permission_service.require_permission(
        user.id, membership.company_id, Permission.MANAGE_MEMBERS
    )
    logs, next_cursor, has_more = await audit_service.list_logs(
        membership.company_id,
        cursor=cursor,
        limit=limit,
        action=action,
        user_id=user_id,
    )

    return AuditLogListResponse(
        items=[AuditLogRead.model_validate(log) for log in logs],
        next_cursor=next_cursor,
        has_more=has_more,
    )
