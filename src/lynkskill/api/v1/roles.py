"""Custom role endpoints. All require CHANGE_ROLES."""

from uuid import UUID

from fastapi import APIRouter, status

from src.lynkskill.api.dependencies import CurrentMembership, CurrentUser, CustomRoleServiceDep
from src.lynkskill.schemas.custom_role import CustomRoleCreate, CustomRoleRead, CustomRoleUpdate

router = APIRouter(prefix="/company/roles", tags=["roles"])


@router.get("", response_model=list[CustomRoleRead], summary="List custom roles")
async def list_roles(
    user: CurrentUser,
    membership: CurrentMembership,
    role_service: CustomRoleServiceDep,
) -> list[CustomRoleRead]:
    roles = await role_service.list_roles(membership.company_id, user)
    return [CustomRoleRead.model_validate(r) for r in roles]


@router.post(
    "",
    response_model=CustomRoleRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create custom role",
)
async def create_role(
    request: CustomRoleCreate,
    user: CurrentUser,
    membership: CurrentMembership,
    role_service: CustomRoleServiceDep,
) -> CustomRoleRead:
    role = await role_service.create_role(
        membership.company_id,
        user,
        name=request.name,
        permissions=request.permissions,
        color=request.color,
    )
    return CustomRoleRead.model_validate(role)


@router.patch("/{role_id}", response_model=CustomRoleRead, summary="Update custom role")
async def update_role(
    role_id: UUID,
    request: CustomRoleUpdate,
    user: CurrentUser,
    membership: CurrentMembership,
    role_service: CustomRoleServiceDep,
) -> CustomRoleRead:
    role = await role_service.update_role(
        membership.company_id, role_id, user, request.model_dump(exclude_unset=True)
    )
    return CustomRoleRead.model_validate(role)


@router.delete(
    "/{role_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete custom role",
    responses={409: {"description": "Role is still assigned"}},
)
async def delete_role(
    role_id: UUID,
    user: CurrentUser,
    membership: CurrentMembership,
    role_service: CustomRoleServiceDep,
) -> None:
    await role_service.delete_role(membership.company_id, role_id, user)
