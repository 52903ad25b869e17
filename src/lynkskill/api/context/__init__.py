"""Request-scoped context for the API layer (audit metadata)."""

from src.lynkskill.api.context.audit_context import (
    AuditContext,
    clear_audit_context,
    get_audit_context,
    get_client_ip,
    set_audit_context,
)

__all__ = [
    "AuditContext",
    "clear_audit_context",
    "get_audit_context",
    "get_client_ip",
    "set_audit_context",
]
