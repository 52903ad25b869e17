"""Tests for structured logging context."""

from unittest.mock import MagicMock
from uuid import uuid7

import pytest
import structlog
from structlog.testing import CapturingLogger

from src.lynkskill.core.logging import (
    bind_request_context,
    bind_user_context,
    clear_request_context,
)

pytestmark = pytest.mark.unit


@pytest.fixture
def capturing_logger():
    """Create a capturing logger for tests."""
    cap_logger = CapturingLogger()
    old_config = structlog.get_config()

    structlog.configure(
        processors=[structlog.contextvars.merge_contextvars],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=lambda *args, **kwargs: cap_logger,
        cache_logger_on_first_use=False,
    )

    clear_request_context()
    yield cap_logger
    clear_request_context()
    structlog.configure(**old_config)


def test_bind_request_context(capturing_logger):
    """Test binding request_id to log context."""
    bind_request_context("test-request-123")
    structlog.get_logger().info("test message")

    entries = capturing_logger.calls
    assert len(entries) == 1
    assert entries[0].kwargs["request_id"] == "test-request-123"


def test_bind_request_context_with_none(capturing_logger):
    """Test that None request_id is not bound."""
    bind_request_context(None)
    structlog.get_logger().info("test message")

    assert "request_id" not in capturing_logger.calls[0].kwargs


def test_bind_user_context(capturing_logger):
    """User and company ids are bound; email is not logged by default."""
    user_id = uuid7()
    company_id = uuid7()

    bind_user_context(user_id, company_id, "test@example.com")
    structlog.get_logger().info("test message")

    entry = capturing_logger.calls[0]
    assert entry.kwargs["user_id"] == str(user_id)
    assert entry.kwargs["company_id"] == str(company_id)
    assert "user_email" not in entry.kwargs


def test_bind_user_context_without_company(capturing_logger):
    bind_user_context(uuid7())
    structlog.get_logger().info("test message")

    assert "company_id" not in capturing_logger.calls[0].kwargs


def test_bind_user_context_with_email_logging_enabled(capturing_logger, monkeypatch):
    """Test binding user context with email logging enabled."""
    from src.lynkskill.core import config

    mock_settings = MagicMock()
    mock_settings.log_user_emails = True
    monkeypatch.setattr(config, "get_settings", lambda: mock_settings)

    bind_user_context(uuid7(), email="test@example.com")
    structlog.get_logger().info("test message")

    assert capturing_logger.calls[0].kwargs["user_email"] == "test@example.com"


def test_clear_request_context(capturing_logger):
    bind_request_context("test-request-123")
    bind_user_context(uuid7(), uuid7())

    clear_request_context()
    structlog.get_logger().info("test message")

    entry = capturing_logger.calls[0]
    assert "request_id" not in entry.kwargs
    assert "user_id" not in entry.kwargs
    assert "company_id" not in entry.kwargs
