"""Rate limiting for brute-force sensitive endpoints.

Company codes are guessable in principle, so join attempts are limited per
client IP. Storage is in-memory (per process).
"""

from slowapi import Limiter
from slowapi.util import get_remote_address
from starlette.requests import Request

from src.lynkskill.core.config import get_settings
from src.lynkskill.core.logging import get_logger

logger = get_logger(__name__)


def get_rate_limit_key(request: Request) -> str:
    """Generate rate limit key from client IP only.

    Never include user-controlled headers in the key; rotating them would
    create unlimited new buckets.
    """
    return get_remote_address(request) or "unknown"


def create_limiter() -> Limiter:
    """Create the rate limiter. Disabled in the testing environment."""
    settings = get_settings()

    if settings.app_env == "testing":
        logger.info("Rate limiter disabled (testing environment)")
        return Limiter(key_func=get_rate_limit_key, enabled=False)

    return Limiter(key_func=get_rate_limit_key)


# Reads settings at import time; reconfiguration requires a restart.
limiter = create_limiter()


def code_join_limit() -> str:
    return get_settings().code_join_rate_limit
