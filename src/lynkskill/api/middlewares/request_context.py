"""Per-request context: log correlation and audit metadata."""

from asgi_correlation_id import correlation_id
from fastapi import Request, Response
from starlette.middleware.base import RequestResponseEndpoint

from src.lynkskill.api.context import clear_audit_context, get_client_ip, set_audit_context
from src.lynkskill.core.logging import bind_request_context, clear_request_context


async def request_context_middleware(
    request: Request, call_next: RequestResponseEndpoint
) -> Response:
    """Bind the request ID to log calls and capture client metadata for audit rows.

    Both contexts are reset on the way in and on the way out, so nothing
    leaks between requests served by the same task.
    """
    request_id = correlation_id.get()
    clear_request_context()
    clear_audit_context()

    bind_request_context(request_id)
    set_audit_context(
        ip_address=get_client_ip(
            request.headers.get("x-forwarded-for"),
            request.client.host if request.client else None,
        ),
        user_agent=request.headers.get("user-agent"),
        request_id=request_id,
    )

    try:
        return await call_next(request)
    finally:
        clear_audit_context()
        clear_request_context()
