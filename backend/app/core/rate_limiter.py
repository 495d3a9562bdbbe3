"""
Rate Limiting for X-Recruit API
===============================
Brute-force protection for the unauthenticated auth endpoints, using slowapi.

- /api/auth/register: REGISTER_RATE_LIMIT (3/minute by default)
- /api/auth/login:    LOGIN_RATE_LIMIT (5/minute by default)

Limits are keyed by client address. Storage defaults to in-process memory;
point RATE_LIMIT_STORAGE_URI at redis:// to share counters across workers.
"""

from slowapi import Limiter
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded
from fastapi import Request
from fastapi.responses import JSONResponse

from app.core.config import settings
from app.core.logging_config import logger


limiter = Limiter(
    key_func=get_remote_address,
    storage_uri=settings.RATE_LIMIT_STORAGE_URI,
    enabled=settings.RATE_LIMIT_ENABLED,
    strategy="fixed-window",
)


async def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded):
    """Return the uniform envelope with a Retry-After hint"""
    logger.warning(
        f"[RateLimit] Exceeded for {get_remote_address(request)} on {request.url.path}: {exc.detail}"
    )

    return JSONResponse(
        status_code=429,
        content={
            "success": False,
            "message": "Too many requests. Please try again later.",
        },
        headers={"Retry-After": "60"},
    )


def register_rate_limit():
    """Rate limit for account creation"""
    return limiter.limit(settings.REGISTER_RATE_LIMIT)


def login_rate_limit():
    """Rate limit for credential checks"""
    return limiter.limit(settings.LOGIN_RATE_LIMIT)
