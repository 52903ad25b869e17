"""Company invitation code helpers.

Code format: ``XXXX-XXXX-XXXX-XXXX`` over an alphabet without 0, O, 1, I and L.
"""

import math
import re
import secrets
from datetime import datetime, timedelta

from src.lynkskill.models.base import utc_now

CODE_CHARS = "ABCDEFGHJKMNPQRSTUVWXYZ23456789"
SEGMENT_LENGTH = 4
SEGMENT_COUNT = 4
CODE_LENGTH = SEGMENT_LENGTH * SEGMENT_COUNT

MASKED_PLACEHOLDER = "****-****-****-****"
CODE_REGEN_COOLDOWN = timedelta(minutes=5)

_CODE_PATTERN = re.compile("-".join([f"[{CODE_CHARS}]{{{SEGMENT_LENGTH}}}"] * SEGMENT_COUNT))
_WHITESPACE = re.compile(r"\s")


def generate_code() -> str:
    """Generate a company code using a CSPRNG for every character."""
    return "-".join(
        "".join(secrets.choice(CODE_CHARS) for _ in range(SEGMENT_LENGTH))
        for _ in range(SEGMENT_COUNT)
    )


def normalize_code(code: str | None) -> str:
    """Uppercase, drop whitespace and re-insert dashes into a bare 16-character code."""
    if not code:
        return ""
    normalized = _WHITESPACE.sub("", code.upper())
    if "-" not in normalized and len(normalized) == CODE_LENGTH:
        normalized = "-".join(
            normalized[i : i + SEGMENT_LENGTH] for i in range(0, CODE_LENGTH, SEGMENT_LENGTH)
        )
    return normalized


def is_valid_code_format(code: str | None) -> bool:
    if not code:
        return False
    return _CODE_PATTERN.fullmatch(normalize_code(code)) is not None


def format_code_for_display(code: str | None) -> str:
    """Normalized code, or an empty string when it is not a valid code."""
    normalized = normalize_code(code)
    return normalized if is_valid_code_format(normalized) else ""


def mask_code(code: str | None) -> str:
    """Hide all but the last segment; invalid input masks completely."""
    normalized = normalize_code(code)
    if not is_valid_code_format(normalized):
        return MASKED_PLACEHOLDER
    return f"****-****-****-{normalized.rsplit('-', 1)[1]}"


def is_code_expired(expires_at: datetime | None, now: datetime | None = None) -> bool:
    if expires_at is None:
        return False
    return (now or utc_now()) > expires_at


def get_time_until_expiry(expires_at: datetime | None, now: datetime | None = None) -> str | None:
    """Coarsest whole unit left before expiry, e.g. ``"3 days remaining"``.

    Returns None when there is no expiry and ``"Expired"`` once it has passed.
    """
    if expires_at is None:
        return None

    remaining = expires_at - (now or utc_now())
    if remaining <= timedelta(0):
        return "Expired"

    days = remaining.days
    hours = remaining.seconds // 3600
    minutes = (remaining.seconds % 3600) // 60

    if days > 0:
        return f"{days} day{'s' if days > 1 else ''} remaining"
    if hours > 0:
        return f"{hours} hour{'s' if hours > 1 else ''} remaining"
    return f"{minutes} minute{'s' if minutes > 1 else ''} remaining"


def regeneration_wait_seconds(
    last_regenerated_at: datetime | None,
    now: datetime | None = None,
    cooldown: timedelta = CODE_REGEN_COOLDOWN,
) -> int:
    """Whole seconds (rounded up) until the code may be regenerated again; 0 when allowed."""
    if last_regenerated_at is None:
        return 0
    left = cooldown - ((now or utc_now()) - last_regenerated_at)
    if left <= timedelta(0):
        return 0
    return math.ceil(left.total_seconds())
