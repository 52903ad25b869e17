"""Unit tests for MemberService."""

from unittest.mock import AsyncMock, MagicMock
from uuid import uuid7

import pytest

from src.lynkskill.core.exceptions import (
    ConflictError,
    NotFoundError,
    PermissionDeniedError,
    ValidationFailedError,
)
from src.lynkskill.models.enums import DefaultRole, MemberStatus, Permission, UserRole
from src.lynkskill.services.member_service import MemberService
from tests.factories import (
    CompanyCustomRoleFactory,
    CompanyFactory,
    CompanyInvitationFactory,
    CompanyMemberFactory,
    UserFactory,
)

pytestmark = pytest.mark.unit


@pytest.fixture
def owner_user():
    return UserFactory.company_owner()


@pytest.fixture
def company(owner_user):
    return CompanyFactory.build(owner_id=owner_user.id)


@pytest.fixture
def owner_member(owner_user, company):
    return CompanyMemberFactory.owner(user_id=owner_user.id, company_id=company.id)


@pytest.fixture
def target_user():
    return UserFactory.team_member()


@pytest.fixture
def target(target_user, company):
    return CompanyMemberFactory.with_role(
        DefaultRole.VIEWER, user_id=target_user.id, company_id=company.id
    )


@pytest.fixture
def repos(company, target, target_user):
    member_repo = MagicMock()
    member_repo.add = MagicMock()
    member_repo.get_active_by_user = AsyncMock(return_value=None)
    member_repo.get_in_company = AsyncMock(return_value=target)
    member_repo.list_with_users = AsyncMock(return_value=[])

    user_repo = MagicMock()
    user_repo.add = MagicMock()
    user_repo.get_by_id = AsyncMock(return_value=target_user)

    company_repo = MagicMock()
    company_repo.add = MagicMock()
    company_repo.get_by_id = AsyncMock(return_value=company)
    company_repo.get_for_update = AsyncMock(return_value=company)

    custom_role_repo = MagicMock()
    custom_role_repo.get_in_company = AsyncMock(return_value=None)
    custom_role_repo.list_by_company = AsyncMock(return_value=[])

    invitation_repo = MagicMock()
    invitation_repo.list_pending = AsyncMock(return_value=[])

    return {
        "member": member_repo,
        "user": user_repo,
        "company": company_repo,
        "custom_role": custom_role_repo,
        "invitation": invitation_repo,
    }


@pytest.fixture
def permission_service(owner_member):
    service = MagicMock()
    service.require_permission = AsyncMock(return_value=owner_member)
    service.require_member = AsyncMock(return_value=owner_member)
    service.get_custom_role = AsyncMock(return_value=None)
    return service


@pytest.fixture
def notification_service():
    service = MagicMock()
    service.notify = AsyncMock()
    return service


@pytest.fixture
def audit_service():
    service = MagicMock()
    service.log_action = AsyncMock()
    return service


@pytest.fixture
def member_service(repos, permission_service, notification_service, audit_service, mock_session):
    return MemberService(
        repos["member"],
        repos["user"],
        repos["company"],
        repos["custom_role"],
        repos["invitation"],
        permission_service,
        notification_service,
        audit_service,
        mock_session,
    )


class TestMyMembership:
    async def test_returns_permissions_and_flags(
        self, member_service, repos, owner_member, owner_user
    ):
        repos["member"].get_active_by_user.return_value = owner_member

        mine = await member_service.get_my_membership(owner_user)

        assert mine.is_owner is True
        assert mine.is_admin is True
        assert mine.view.permissions == frozenset(Permission)
        assert mine.view.role_name == "Owner"

    async def test_no_membership(self, member_service, owner_user):
        with pytest.raises(NotFoundError):
            await member_service.get_my_membership(owner_user)


class TestListMembers:
    async def test_members_and_pending_invitations(
        self, member_service, repos, company, owner_member, owner_user, target, target_user
    ):
        invitation = CompanyInvitationFactory.build(
            company_id=company.id, invited_by_user_id=owner_user.id
        )
        repos["member"].list_with_users.return_value = [
            (owner_member, owner_user),
            (target, target_user),
        ]
        repos["invitation"].list_pending.return_value = [invitation]

        team = await member_service.list_members(company.id, owner_user)

        assert [v.member for v in team.members] == [owner_member, target]
        assert team.members[1].role_name == "Viewer"
        assert team.pending_invitations == [invitation]

    async def test_requires_membership(self, member_service, permission_service, company):
        permission_service.require_member.side_effect = PermissionDeniedError(
            message="You are not a member of this company"
        )

        with pytest.raises(PermissionDeniedError):
            await member_service.list_members(company.id, UserFactory.build())


class TestChangeMemberRole:
    async def test_change_to_default_role(self, member_service, target, company, owner_user):
        member = await member_service.change_member_role(
            company.id, target.id, owner_user, role="HR_MANAGER"
        )

        assert member.default_role == DefaultRole.HR_MANAGER.value
        assert member.custom_role_id is None

    async def test_change_to_custom_role_clears_default(
        self, member_service, repos, target, company, owner_user
    ):
        custom_role = CompanyCustomRoleFactory.build(company_id=company.id)
        repos["custom_role"].get_in_company.return_value = custom_role

        member = await member_service.change_member_role(
            company.id, target.id, owner_user, custom_role_id=custom_role.id
        )

        assert member.default_role is None
        assert member.custom_role_id == custom_role.id

    async def test_cannot_assign_owner(
        self, member_service, target, company, owner_user, mock_session
    ):
        with pytest.raises(ValidationFailedError, match="ownership transfer"):
            await member_service.change_member_role(
                company.id, target.id, owner_user, role="OWNER"
            )

        mock_session.commit.assert_not_called()

    async def test_exactly_one_role_required(self, member_service, target, company, owner_user):
        with pytest.raises(ValidationFailedError, match="exactly one"):
            await member_service.change_member_role(company.id, target.id, owner_user)

    async def test_cannot_change_own_role(
        self, member_service, repos, owner_member, company, owner_user
    ):
        repos["member"].get_in_company.return_value = owner_member

        with pytest.raises(ValidationFailedError, match="own role"):
            await member_service.change_member_role(
                company.id, owner_member.id, owner_user, role="VIEWER"
            )

    async def test_admin_cannot_manage_owner(
        self, member_service, repos, permission_service, owner_member, company
    ):
        admin_user = UserFactory.team_member()
        admin = CompanyMemberFactory.admin(user_id=admin_user.id, company_id=company.id)
        permission_service.require_permission.return_value = admin
        repos["member"].get_in_company.return_value = owner_member

        with pytest.raises(PermissionDeniedError):
            await member_service.change_member_role(
                company.id, owner_member.id, admin_user, role="VIEWER"
            )

    async def test_removed_target_not_found(self, member_service, target, company, owner_user):
        target.status = MemberStatus.REMOVED.value

        with pytest.raises(NotFoundError):
            await member_service.change_member_role(
                company.id, target.id, owner_user, role="VIEWER"
            )


class TestExtraPermissions:
    async def test_grant_extras(self, member_service, target, company, owner_user):
        member = await member_service.update_extra_permissions(
            company.id, target.id, owner_user, ["SEND_MESSAGES", "CREATE_INTERNSHIPS"]
        )

        assert member.extra_permissions == ["CREATE_INTERNSHIPS", "SEND_MESSAGES"]

    @pytest.mark.parametrize("permission", ["DELETE_COMPANY", "TRANSFER_OWNERSHIP"])
    async def test_non_delegable_rejected(
        self, member_service, target, company, owner_user, permission
    ):
        with pytest.raises(ValidationFailedError, match="cannot be granted"):
            await member_service.update_extra_permissions(
                company.id, target.id, owner_user, [permission]
            )

        assert target.extra_permissions == []


class TestRemoveMember:
    async def test_marks_removed_and_keeps_role(
        self, member_service, target, company, owner_user, notification_service
    ):
        target.extra_permissions = ["SEND_MESSAGES"]

        member = await member_service.remove_member(company.id, target.id, owner_user)

        assert member.status == MemberStatus.REMOVED.value
        assert member.removed_at is not None
        assert member.default_role == DefaultRole.VIEWER.value
        assert member.extra_permissions == ["SEND_MESSAGES"]
        notification_service.notify.assert_called_once()

    async def test_owner_cannot_be_removed(
        self, member_service, repos, permission_service, company, owner_member
    ):
        admin_user = UserFactory.team_member()
        permission_service.require_permission.return_value = CompanyMemberFactory.admin(
            user_id=admin_user.id, company_id=company.id
        )
        repos["member"].get_in_company.return_value = owner_member

        with pytest.raises(ConflictError, match="owner cannot be removed"):
            await member_service.remove_member(company.id, owner_member.id, admin_user)

    async def test_hr_manager_cannot_remove(
        self, member_service, permission_service, target, company
    ):
        manager_user = UserFactory.team_member()
        permission_service.require_permission.return_value = CompanyMemberFactory.with_role(
            DefaultRole.HR_MANAGER,
            user_id=manager_user.id,
            company_id=company.id,
            extra_permissions=["REMOVE_MEMBERS"],
        )

        with pytest.raises(PermissionDeniedError):
            await member_service.remove_member(company.id, target.id, manager_user)

        assert target.status == MemberStatus.ACTIVE.value

    async def test_unknown_member(self, member_service, repos, company, owner_user):
        repos["member"].get_in_company.return_value = None

        with pytest.raises(NotFoundError):
            await member_service.remove_member(company.id, uuid7(), owner_user)


class TestTransferOwnership:
    async def test_swaps_owner_and_admin(
        self, member_service, company, owner_member, owner_user, target, target_user
    ):
        target.extra_permissions = ["CREATE_INTERNSHIPS"]

        new_owner = await member_service.transfer_ownership(company.id, target.id, owner_user)

        assert new_owner.default_role == DefaultRole.OWNER.value
        assert new_owner.extra_permissions == []
        assert owner_member.default_role == DefaultRole.ADMIN.value
        assert company.owner_id == target_user.id
        assert target_user.role == UserRole.COMPANY.value
        assert owner_user.role == UserRole.TEAM_MEMBER.value

    async def test_target_must_be_active(self, member_service, company, owner_user, target):
        target.status = MemberStatus.REMOVED.value

        with pytest.raises(NotFoundError):
            await member_service.transfer_ownership(company.id, target.id, owner_user)

    async def test_cannot_transfer_to_self(
        self, member_service, repos, company, owner_member, owner_user
    ):
        repos["member"].get_in_company.return_value = owner_member

        with pytest.raises(ValidationFailedError):
            await member_service.transfer_ownership(company.id, owner_member.id, owner_user)

        assert owner_member.default_role == DefaultRole.OWNER.value
