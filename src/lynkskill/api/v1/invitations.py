"""Invitation endpoints.

Company-side management lives under ``/company/invitations``; the invitee
acts on ``/invitations/{token}`` with the plaintext token from the email.
"""

from uuid import UUID

from fastapi import APIRouter, status

from src.lynkskill.api.dependencies import CurrentMembership, CurrentUser, InvitationServiceDep
from src.lynkskill.schemas.invitation import (
    InvitationAcceptResponse,
    InvitationCreateResponse,
    InvitationInfoResponse,
    InvitationRead,
)

router = APIRouter(tags=["invitations"])


# =============================================================================
# Company endpoints (require INVITE_MEMBERS in the caller's company)
# =============================================================================


@router.get(
    "/company/invitations",
    response_model=list[InvitationRead],
    summary="List pending invitations",
)
async def list_pending_invitations(
    user: CurrentUser,
    membership: CurrentMembership,
    invitation_service: InvitationServiceDep,
) -> list[InvitationRead]:
    invitations = await invitation_service.list_pending_invitations(membership.company_id, user)
    return [InvitationRead.model_validate(i) for i in invitations]


@router.post(
    "/company/invitations/{invitation_id}/resend",
    response_model=InvitationCreateResponse,
    summary="Resend invitation",
    description="Issue a new token and expiry. The previous link stops working.",
)
async def resend_invitation(
    invitation_id: UUID,
    user: CurrentUser,
    membership: CurrentMembership,
    invitation_service: InvitationServiceDep,
) -> InvitationCreateResponse:
    invitation, _ = await invitation_service.resend_invitation(
        membership.company_id, invitation_id, user
    )
    response = InvitationCreateResponse.model_validate(invitation)
    response.message = "Invitation resent successfully"
    return response


@router.delete(
    "/company/invitations/{invitation_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Cancel invitation",
)
async def cancel_invitation(
    invitation_id: UUID,
    user: CurrentUser,
    membership: CurrentMembership,
    invitation_service: InvitationServiceDep,
) -> None:
    await invitation_service.cancel_invitation(membership.company_id, invitation_id, user)


# =============================================================================
# Invitee endpoints (token-based)
# =============================================================================


@router.get(
    "/invitations/{token}",
    response_model=InvitationInfoResponse,
    summary="Get invitation info",
    description="Public information about an invitation for the accept page.",
)
async def get_invitation_info(
    token: str,
    invitation_service: InvitationServiceDep,
) -> InvitationInfoResponse:
    info = await invitation_service.get_invitation_info(token)
    return InvitationInfoResponse(**info)


@router.post(
    "/invitations/{token}/accept",
    response_model=InvitationAcceptResponse,
    summary="Accept invitation",
)
async def accept_invitation(
    token: str,
    user: CurrentUser,
    invitation_service: InvitationServiceDep,
) -> InvitationAcceptResponse:
    member = await invitation_service.accept_invitation(token, user)
    return InvitationAcceptResponse(member_id=member.id, company_id=member.company_id)


@router.delete(
    "/invitations/{token}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Decline invitation",
)
async def decline_invitation(
    token: str,
    user: CurrentUser,
    invitation_service: InvitationServiceDep,
) -> None:
    await invitation_service.decline_invitation(token, user)
