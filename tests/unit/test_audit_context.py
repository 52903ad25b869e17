"""Tests for request audit metadata."""

from dataclasses import FrozenInstanceError

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from src.lynkskill.api.context import (
    AuditContext,
    clear_audit_context,
    get_audit_context,
    get_client_ip,
    set_audit_context,
)
from src.lynkskill.api.middlewares import setup_middlewares
from src.lynkskill.core.config import get_settings

pytestmark = pytest.mark.unit


@pytest.fixture(autouse=True)
def _clean_context():
    clear_audit_context()
    yield
    clear_audit_context()


class TestAuditContext:
    def test_is_frozen(self):
        ctx = AuditContext(ip_address="1.2.3.4")
        with pytest.raises(FrozenInstanceError):
            ctx.ip_address = "5.6.7.8"  # type: ignore[misc]

    def test_set_then_get(self):
        set_audit_context(ip_address="10.0.0.7", user_agent="curl/8.5", request_id="req-1")

        ctx = get_audit_context()
        assert ctx == AuditContext(ip_address="10.0.0.7", user_agent="curl/8.5", request_id="req-1")

    def test_unset_is_none(self):
        assert get_audit_context() is None

    def test_long_user_agent_is_truncated(self):
        set_audit_context(user_agent="x" * 600)

        ctx = get_audit_context()
        assert ctx is not None
        assert len(ctx.user_agent) == 500


class TestGetClientIp:
    @pytest.mark.parametrize(
        ("forwarded_for", "client_host", "expected"),
        [
            ("1.2.3.4, 5.6.7.8", "192.168.1.1", "1.2.3.4"),
            ("  1.2.3.4  , 5.6.7.8", None, "1.2.3.4"),
            (None, "192.168.1.1", "192.168.1.1"),
            ("", "192.168.1.1", "192.168.1.1"),
            (None, None, None),
            ("2001:db8::1, 2001:db8::2", None, "2001:db8::1"),
        ],
    )
    def test_client_ip(self, forwarded_for, client_host, expected):
        assert get_client_ip(forwarded_for, client_host) == expected


class TestRequestContextMiddleware:
    def test_endpoint_sees_client_metadata(self):
        app = FastAPI()
        seen = {}

        @app.get("/probe")
        async def probe() -> dict[str, str]:
            seen["ctx"] = get_audit_context()
            return {}

        setup_middlewares(app, get_settings())
        response = TestClient(app).get(
            "/probe",
            headers={"X-Forwarded-For": "203.0.113.9, 10.0.0.1", "User-Agent": "pytest"},
        )

        ctx = seen["ctx"]
        assert ctx.ip_address == "203.0.113.9"
        assert ctx.user_agent == "pytest"
        assert ctx.request_id == response.headers["X-Request-ID"]
