"""Authentication dependencies.

Tokens are issued by the identity provider integration; this service only
verifies them and maps ``sub`` to a local user.
"""

from typing import Annotated

from fastapi import Depends, Header, HTTPException, status

from src.lynkskill.api.dependencies.repositories import MemberRepo, UserRepo
from src.lynkskill.core.config import get_settings
from src.lynkskill.core.logging import bind_user_context
from src.lynkskill.core.security import decode_token
from src.lynkskill.models import CompanyMember, User


async def get_current_user(
    user_repo: UserRepo,
    authorization: Annotated[str | None, Header()] = None,
) -> User:
    """Validate the bearer token and return the matching active user."""
    if not authorization or not authorization.startswith("Bearer "):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing or invalid authorization header",
        )

    payload = decode_token(authorization[7:])
    if payload is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
        )

    required_type = get_settings().jwt_required_token_type
    if required_type is not None and payload.get("type") != required_type:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token type",
        )

    subject = payload.get("sub")
    if not subject:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token payload",
        )

    user = await user_repo.get_by_external_id(str(subject))
    if user is None or not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found or inactive",
        )

    bind_user_context(user.id, email=user.email)
    return user


CurrentUser = Annotated[User, Depends(get_current_user)]


async def get_current_membership(user: CurrentUser, member_repo: MemberRepo) -> CompanyMember:
    """The caller's active membership; company-scoped routes act on its company."""
    member = await member_repo.get_active_by_user(user.id)
    if member is None:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You are not a member of any company",
        )
    bind_user_context(user.id, company_id=member.company_id, email=user.email)
    return member


CurrentMembership = Annotated[CompanyMember, Depends(get_current_membership)]
