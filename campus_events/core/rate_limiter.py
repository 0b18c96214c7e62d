"""
Rate Limiting for the Campus Events API
=======================================
Implements rate limiting using slowapi with in-process storage.

Only the login endpoints are limited (brute force protection on roll
numbers and faculty ids). The limit is keyed by client IP.
"""

from slowapi import Limiter
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded
from fastapi import Request
from fastapi.responses import JSONResponse

from campus_events.core.config import settings
from campus_events.core.logging_config import logger


def get_client_identifier(request: Request) -> str:
    """Rate limit key: client IP address"""
    return f"ip:{get_remote_address(request)}"


limiter = Limiter(
    key_func=get_client_identifier,
    enabled=settings.RATE_LIMIT_ENABLED,
    strategy="fixed-window",
)


async def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded):
    """Return a `{message}` body with a Retry-After header"""
    retry_after = exc.detail.split(":")[-1].strip() if exc.detail else "60"

    logger.warning(
        f"[RateLimit] Exceeded for {get_client_identifier(request)}: {exc.detail}"
    )

    return JSONResponse(
        status_code=429,
        content={"message": "Too many requests. Please slow down."},
        headers={"Retry-After": retry_after if retry_after.isdigit() else "60"},
    )


def login_rate_limit():
    """Rate limit for login endpoints (LOGIN_RATE_LIMIT, default 10/min)"""
    return limiter.limit(settings.LOGIN_RATE_LIMIT)
