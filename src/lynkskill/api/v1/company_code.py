"""Company code endpoints: settings for managers, preview and join for users."""

from typing import Annotated

from fastapi import APIRouter, Query, Request

from src.lynkskill.api.dependencies import CompanyCodeServiceDep, CurrentMembership, CurrentUser
from src.lynkskill.core.rate_limit import code_join_limit, limiter
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

router = APIRouter(prefix="/company", tags=["company-code"])

CursorQuery = Annotated[str | None, Query(description="Pagination cursor")]
LimitQuery = Annotated[int, Query(ge=1, le=100, description="Items per page")]


@router.get("/code", response_model=CodeSettingsResponse, summary="Get code settings")
async def get_code_settings(
    user: CurrentUser,
    membership: CurrentMembership,
    code_service: CompanyCodeServiceDep,
) -> CodeSettingsResponse:
    settings = await code_service.get_code_settings(membership.company_id, user)
    return CodeSettingsResponse(**settings)


@router.post(
    "/code/regenerate",
    response_model=CodeSettingsResponse,
    summary="Regenerate code",
    description="Replace the company code. Limited to once per cooldown window.",
    responses={429: {"description": "Regenerated too recently; see Retry-After"}},
)
async def regenerate_code(
    user: CurrentUser,
    membership: CurrentMembership,
    code_service: CompanyCodeServiceDep,
) -> CodeSettingsResponse:
    settings = await code_service.regenerate_code(membership.company_id, user)
    return CodeSettingsResponse(**settings)


@router.patch("/code", response_model=CodeSettingsResponse, summary="Update code settings")
async def update_code_settings(
    request: CodeSettingsUpdateRequest,
    user: CurrentUser,
    membership: CurrentMembership,
    code_service: CompanyCodeServiceDep,
) -> CodeSettingsResponse:
    settings = await code_service.update_code_settings(
        membership.company_id, user, request.model_dump(exclude_unset=True)
    )
    return CodeSettingsResponse(**settings)


@router.get(
    "/code/history",
    response_model=CodeJoinListResponse,
    summary="List code joins",
    description="Members who joined with the company code, newest first.",
)
async def list_code_joins(
    user: CurrentUser,
    membership: CurrentMembership,
    code_service: CompanyCodeServiceDep,
    cursor: CursorQuery = None,
    limit: LimitQuery = 20,
) -> CodeJoinListResponse:
    joins, next_cursor, has_more = await code_service.list_code_joins(
        membership.company_id, user, cursor=cursor, limit=limit
    )
    return CodeJoinListResponse(
        items=[
            CodeJoinRead(
                member_id=member.id,
                user_id=member.user_id,
                user_name=joined_user.full_name if joined_user else None,
                user_email=joined_user.email if joined_user else None,
                status=member.status,
                joined_at=member.joined_at,
            )
            for member, joined_user in joins
        ],
        next_cursor=next_cursor,
        has_more=has_more,
    )


@router.post(
    "/join",
    response_model=JoinPreviewResponse,
    summary="Preview company code",
    description="Validate a code without joining and show the company.",
)
@limiter.limit(code_join_limit)
async def preview_code(
    request: Request,
    body: JoinCodeRequest,
    user: CurrentUser,
    code_service: CompanyCodeServiceDep,
) -> JoinPreviewResponse:
    preview = await code_service.preview_code(body.code, user)
    return JoinPreviewResponse(company=CompanyPreview(**preview))


@router.post(
    "/join/confirm",
    response_model=JoinResponse,
    summary="Join with company code",
)
@limiter.limit(code_join_limit)
async def join_via_code(
    request: Request,
    body: JoinCodeRequest,
    user: CurrentUser,
    code_service: CompanyCodeServiceDep,
) -> JoinResponse:
    member = await code_service.join_via_code(body.code, user)
    return JoinResponse(
        member_id=member.id,
        company_id=member.company_id,
        role=member.default_role or "",
    )
