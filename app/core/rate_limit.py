"""Rate limiting configuration using slowapi."""

from slowapi import Limiter
from slowapi.util import get_remote_address

from app.core.config import settings


# Create limiter instance
limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[settings.RATE_LIMIT_DEFAULT],
)


def rate_limit_read(limit: str = "120/minute"):
    """Rate limit for polling endpoints (by IP)."""
    return limiter.limit(limit)


def rate_limit_write(limit: str = "30/minute"):
    """Rate limit for endpoints that mutate the registry or fan out updates."""
    return limiter.limit(limit)


def rate_limit_compute(limit: str = "60/minute"):
    """Rate limit for endpoints that assemble a view from a request body."""
    return limiter.limit(limit)
