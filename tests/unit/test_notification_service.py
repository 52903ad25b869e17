"""Unit tests for NotificationService."""

from unittest.mock import AsyncMock, MagicMock
from uuid import uuid7

import pytest

from src.lynkskill.models.enums import NotificationType
from src.lynkskill.services.notification_service import NotificationService

pytestmark = pytest.mark.unit


@pytest.fixture
def notification_repo() -> MagicMock:
    repo = MagicMock()
    repo.add = MagicMock()
    repo.list_by_user = AsyncMock(return_value=([], None, False))
    return repo


@pytest.fixture
def notification_service(notification_repo, mock_session) -> NotificationService:
    return NotificationService(notification_repo, mock_session)


async def test_notify_creates_row(notification_service, notification_repo, mock_session):
    user_id = uuid7()

    notification = await notification_service.notify(
        user_id,
        NotificationType.TEAM_ROLE_CHANGED,
        "Role Updated",
        "Your role is now Viewer",
        link="/dashboard/company/team",
    )

    assert notification.user_id == user_id
    assert notification.type == "TEAM_ROLE_CHANGED"
    assert notification.is_read is False
    notification_repo.add.assert_called_once_with(notification)
    mock_session.commit.assert_called_once()


async def test_notify_failure_is_swallowed(notification_service, mock_session):
    mock_session.commit.side_effect = Exception("DB down")

    result = await notification_service.notify(
        uuid7(), NotificationType.TEAM_MEMBER_JOINED, "New Team Member", "Someone joined"
    )

    assert result is None
    mock_session.rollback.assert_called_once()


async def test_list_for_user(notification_service, notification_repo):
    user_id = uuid7()

    await notification_service.list_for_user(user_id, unread_only=True)

    notification_repo.list_by_user.assert_called_once_with(user_id, None, 50, True)
