"""Unit tests for CustomRoleService."""

from unittest.mock import AsyncMock, MagicMock
from uuid import uuid7

import pytest
from sqlalchemy.exc import IntegrityError

from src.lynkskill.core.exceptions import ConflictError, NotFoundError, ValidationFailedError
from src.lynkskill.models.audit import AuditAction
from src.lynkskill.services.custom_role_service import CustomRoleService
from tests.factories import CompanyCustomRoleFactory, UserFactory

pytestmark = pytest.mark.unit


@pytest.fixture
def company_id():
    return uuid7()


@pytest.fixture
def actor():
    return UserFactory.company_owner()


@pytest.fixture
def custom_role_repo():
    repo = MagicMock()
    repo.add = MagicMock()
    repo.delete = AsyncMock()
    repo.get_by_name = AsyncMock(return_value=None)
    repo.get_in_company = AsyncMock(return_value=None)
    repo.list_by_company = AsyncMock(return_value=[])
    return repo


@pytest.fixture
def member_repo():
    repo = MagicMock()
    repo.count_by_custom_role = AsyncMock(return_value=0)
    return repo


@pytest.fixture
def invitation_repo():
    repo = MagicMock()
    repo.count_pending_by_custom_role = AsyncMock(return_value=0)
    return repo


@pytest.fixture
def permission_service():
    service = MagicMock()
    service.require_permission = AsyncMock()
    return service


@pytest.fixture
def audit_service():
    service = MagicMock()
    service.log_action = AsyncMock()
    return service


@pytest.fixture
def role_service(
    custom_role_repo, member_repo, invitation_repo, permission_service, audit_service, mock_session
):
    return CustomRoleService(
        custom_role_repo,
        member_repo,
        invitation_repo,
        permission_service,
        audit_service,
        mock_session,
    )


class TestCreateRole:
    async def test_create(self, role_service, custom_role_repo, audit_service, company_id, actor):
        role = await role_service.create_role(
            company_id,
            actor,
            name="  Intern Coordinator ",
            permissions=["VIEW_CANDIDATES", "CREATE_ASSIGNMENTS"],
            color="#00ff00",
        )

        assert role.name == "Intern Coordinator"
        assert role.permissions == ["VIEW_CANDIDATES", "CREATE_ASSIGNMENTS"]
        custom_role_repo.add.assert_called_once_with(role)
        assert audit_service.log_action.call_args.args[1] == AuditAction.CUSTOM_ROLE_CREATE

    async def test_non_delegable_permission_rejected(
        self, role_service, custom_role_repo, company_id, actor
    ):
        with pytest.raises(ValidationFailedError, match="cannot be granted"):
            await role_service.create_role(
                company_id, actor, name="Heir", permissions=["TRANSFER_OWNERSHIP"]
            )

        custom_role_repo.add.assert_not_called()

    async def test_duplicate_name(self, role_service, custom_role_repo, company_id, actor):
        custom_role_repo.get_by_name.return_value = CompanyCustomRoleFactory.build(
            company_id=company_id, name="Scout"
        )

        with pytest.raises(ConflictError, match="already exists"):
            await role_service.create_role(company_id, actor, name="Scout", permissions=[])

    async def test_racing_duplicate_name(self, role_service, mock_session, company_id, actor):
        mock_session.commit.side_effect = IntegrityError("insert", {}, Exception("duplicate"))

        with pytest.raises(ConflictError):
            await role_service.create_role(company_id, actor, name="Scout", permissions=[])

        mock_session.rollback.assert_called_once()

    @pytest.mark.parametrize("name", ["", "   ", "x" * 51])
    async def test_bad_names(self, role_service, company_id, actor, name):
        with pytest.raises(ValidationFailedError):
            await role_service.create_role(company_id, actor, name=name, permissions=[])


class TestUpdateRole:
    async def test_partial_update(self, role_service, custom_role_repo, company_id, actor):
        role = CompanyCustomRoleFactory.build(
            company_id=company_id, name="Scout", permissions=["VIEW_CANDIDATES"]
        )
        custom_role_repo.get_in_company.return_value = role

        updated = await role_service.update_role(
            company_id, role.id, actor, {"permissions": ["SEARCH_CANDIDATES"]}
        )

        assert updated.name == "Scout"
        assert updated.permissions == ["SEARCH_CANDIDATES"]

    async def test_rename_to_taken_name(self, role_service, custom_role_repo, company_id, actor):
        role = CompanyCustomRoleFactory.build(company_id=company_id, name="Scout")
        custom_role_repo.get_in_company.return_value = role
        custom_role_repo.get_by_name.return_value = CompanyCustomRoleFactory.build(
            company_id=company_id, name="Ranger"
        )

        with pytest.raises(ConflictError):
            await role_service.update_role(company_id, role.id, actor, {"name": "Ranger"})

    async def test_unknown_role(self, role_service, company_id, actor):
        with pytest.raises(NotFoundError):
            await role_service.update_role(company_id, uuid7(), actor, {"name": "X"})


class TestDeleteRole:
    async def test_delete_unused_role(self, role_service, custom_role_repo, company_id, actor):
        role = CompanyCustomRoleFactory.build(company_id=company_id)
        custom_role_repo.get_in_company.return_value = role

        await role_service.delete_role(company_id, role.id, actor)

        custom_role_repo.delete.assert_called_once_with(role)

    async def test_delete_role_in_use_refused(
        self, role_service, custom_role_repo, member_repo, invitation_repo, company_id, actor
    ):
        role = CompanyCustomRoleFactory.build(company_id=company_id)
        custom_role_repo.get_in_company.return_value = role
        member_repo.count_by_custom_role.return_value = 2
        invitation_repo.count_pending_by_custom_role.return_value = 1

        with pytest.raises(ConflictError, match="2 member"):
            await role_service.delete_role(company_id, role.id, actor)

        custom_role_repo.delete.assert_not_called()
