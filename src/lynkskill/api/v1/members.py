"""Company membership endpoints: the caller's membership and team management."""

from uuid import UUID

from fastapi import APIRouter, status

from src.lynkskill.api.dependencies import (
    CurrentMembership,
    CurrentUser,
    InvitationServiceDep,
    MemberServiceDep,
)
from src.lynkskill.schemas.invitation import (
    InvitationCreateRequest,
    InvitationCreateResponse,
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
from src.lynkskill.services.member_service import MembershipView

router = APIRouter(prefix="/company", tags=["members"])


def member_read(view: MembershipView) -> MemberRead:
    member = view.member
    return MemberRead(
        id=member.id,
        user_id=member.user_id,
        email=view.user.email if view.user else None,
        full_name=view.user.full_name if view.user else None,
        default_role=member.default_role,
        custom_role_id=member.custom_role_id,
        role_name=view.role_name,
        extra_permissions=member.extra_permissions or [],
        permissions=sorted(view.permissions, key=lambda p: p.value),
        status=member.status,
        joined_via_code=member.joined_via_code,
        invited_by_email=member.invited_by_email,
        joined_at=member.joined_at,
        removed_at=member.removed_at,
    )


@router.get(
    "/me",
    response_model=MyMembershipResponse,
    summary="Get my membership",
    description="The caller's active company membership with effective permissions.",
)
async def get_my_membership(
    user: CurrentUser,
    member_service: MemberServiceDep,
) -> MyMembershipResponse:
    mine = await member_service.get_my_membership(user)
    return MyMembershipResponse(
        company=CompanySummary.model_validate(mine.company),
        member=member_read(mine.view),
        is_owner=mine.is_owner,
        is_admin=mine.is_admin,
    )


@router.get(
    "/me/permissions",
    response_model=MyPermissionsResponse,
    summary="Get my permissions",
)
async def get_my_permissions(
    user: CurrentUser,
    member_service: MemberServiceDep,
) -> MyPermissionsResponse:
    mine = await member_service.get_my_membership(user)
    return MyPermissionsResponse(
        company_id=mine.company.id,
        role_name=mine.view.role_name,
        permissions=sorted(mine.view.permissions, key=lambda p: p.value),
    )


@router.get(
    "/members",
    response_model=TeamResponse,
    summary="List team",
    description="Active members and outstanding invitations of the caller's company.",
)
async def list_members(
    user: CurrentUser,
    membership: CurrentMembership,
    member_service: MemberServiceDep,
) -> TeamResponse:
    team = await member_service.list_members(membership.company_id, user)
    return TeamResponse(
        members=[member_read(view) for view in team.members],
        pending_invitations=[InvitationRead.model_validate(i) for i in team.pending_invitations],
    )


@router.post(
    "/members",
    response_model=InvitationCreateResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Invite member",
    description="Create and send an invitation. Requires INVITE_MEMBERS.",
)
async def invite_member(
    request: InvitationCreateRequest,
    user: CurrentUser,
    membership: CurrentMembership,
    invitation_service: InvitationServiceDep,
) -> InvitationCreateResponse:
    invitation, _ = await invitation_service.create_invitation(
        membership.company_id,
        user,
        email=request.email,
        role=request.role,
        custom_role_id=request.custom_role_id,
    )
    return InvitationCreateResponse.model_validate(invitation)


@router.patch(
    "/members/{member_id}/role",
    response_model=MemberRead,
    summary="Change member role",
    description="Assign a default role or a custom role. Requires CHANGE_ROLES.",
)
async def change_member_role(
    member_id: UUID,
    request: ChangeRoleRequest,
    user: CurrentUser,
    membership: CurrentMembership,
    member_service: MemberServiceDep,
) -> MemberRead:
    member = await member_service.change_member_role(
        membership.company_id,
        member_id,
        user,
        role=request.role.value if request.role else None,
        custom_role_id=request.custom_role_id,
    )
    return member_read(await member_service.describe(member))


@router.patch(
    "/members/{member_id}/permissions",
    response_model=MemberRead,
    summary="Set extra permissions",
    description="Replace a member's extra permissions. Requires DELEGATE_PERMISSIONS.",
)
async def update_extra_permissions(
    member_id: UUID,
    request: ExtraPermissionsRequest,
    user: CurrentUser,
    membership: CurrentMembership,
    member_service: MemberServiceDep,
) -> MemberRead:
    member = await member_service.update_extra_permissions(
        membership.company_id, member_id, user, request.permissions
    )
    return member_read(await member_service.describe(member))


@router.delete(
    "/members/{member_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Remove member",
    description="Mark a member REMOVED. Requires REMOVE_MEMBERS.",
)
async def remove_member(
    member_id: UUID,
    user: CurrentUser,
    membership: CurrentMembership,
    member_service: MemberServiceDep,
) -> None:
    await member_service.remove_member(membership.company_id, member_id, user)


@router.post(
    "/transfer-ownership",
    response_model=MemberRead,
    summary="Transfer ownership",
    description="Make another active member the owner. The caller becomes ADMIN.",
)
async def transfer_ownership(
    request: TransferOwnershipRequest,
    user: CurrentUser,
    membership: CurrentMembership,
    member_service: MemberServiceDep,
) -> MemberRead:
    new_owner = await member_service.transfer_ownership(
        membership.company_id, request.new_owner_member_id, user
    )
    return member_read(await member_service.describe(new_owner))
