"""Email client using Resend API."""

import html
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FuturesTimeoutError
from datetime import datetime

import resend

from src.lynkskill.core.config import get_settings
from src.lynkskill.core.logging import get_logger

logger = get_logger(__name__)

# Thread pool for email sending with timeout support
_email_executor = ThreadPoolExecutor(max_workers=4, thread_name_prefix="email_sender")

_BODY_STYLE = (
    "font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif; "
    "line-height: 1.6; color: #333; max-width: 600px; margin: 0 auto; padding: 20px;"
)
_BUTTON_STYLE = (
    "background-color: #7c3aed; color: white; padding: 12px 24px; "
    "text-decoration: none; border-radius: 6px; display: inline-block; font-weight: 500;"
)
_LINK_STYLE = "color: #7c3aed; word-break: break-all;"
_MUTED_STYLE = "color: #666; font-size: 14px;"


def build_invitation_url(token: str) -> str:
    return f"{get_settings().app_url}/invitations?token={token}"


def send_invitation_email(
    to: str,
    token: str,
    company_name: str,
    inviter_name: str,
    role_label: str,
    expires_at: datetime,
) -> bool:
    """Send a company team invitation email.

    Args:
        to: Recipient email address
        token: Invitation token (plaintext, only ever travels in this URL)
        company_name: Name of the company being joined
        inviter_name: Name of the member who sent the invitation
        role_label: Display label of the role granted on acceptance
        expires_at: When the invitation stops being valid (UTC)

    Returns:
        True if email was sent (or logged in dev mode), False on error
    """
    settings = get_settings()
    invitation_url = build_invitation_url(token)

    if not settings.resend_api_key:
        # Dev mode: log instead of sending (never the token)
        logger.warning(
            "RESEND_API_KEY not set - invitation email not sent",
            to=to,
            email_type="company_invitation",
        )
        return True

    resend.api_key = settings.resend_api_key

    def _send() -> None:
        resend.Emails.send(
            {
                "from": settings.email_from,
                "to": [to],
                "subject": f"You've been invited to join {company_name} on {settings.app_name}",
                "html": _get_invitation_email_html(
                    company_name, inviter_name, role_label, invitation_url, expires_at
                ),
            }
        )

    try:
        future = _email_executor.submit(_send)
        future.result(timeout=settings.email_send_timeout_seconds)
        logger.info("Invitation email sent", to=to)
        return True
    except FuturesTimeoutError:
        logger.error("Email send timed out", to=to, timeout=settings.email_send_timeout_seconds)
        return False
    except Exception as e:
        logger.error("Failed to send invitation email", to=to, error=str(e))
        return False


def _get_invitation_email_html(
    company_name: str,
    inviter_name: str,
    role_label: str,
    invitation_url: str,
    expires_at: datetime,
) -> str:
    safe_company_name = html.escape(company_name)
    safe_inviter_name = html.escape(inviter_name)
    safe_role_label = html.escape(role_label)
    expires_on = expires_at.strftime("%B %d, %Y")
    return f"""<!DOCTYPE html>
<html>
<head>
    <meta charset="utf-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
</head>
<body style="{_BODY_STYLE}">
    <h1 style="color: #7c3aed; margin-bottom: 24px;">You're invited!</h1>
    <p>{safe_inviter_name} has invited you to join <strong>{safe_company_name}</strong>
    as <strong>{safe_role_label}</strong>.</p>
    <p>Click the button below to accept the invitation:</p>
    <p style="margin: 32px 0;">
        <a href="{invitation_url}" style="{_BUTTON_STYLE}">Accept Invitation</a>
    </p>
    <p style="{_MUTED_STYLE}">
        Or copy and paste this link into your browser:<br>
        <a href="{invitation_url}" style="{_LINK_STYLE}">{invitation_url}</a>
    </p>
    <p style="{_MUTED_STYLE} margin-top: 32px;">
        This invitation expires on {expires_on}. If you didn't expect this invitation,
        you can safely ignore this email.
    </p>
</body>
</html>"""
