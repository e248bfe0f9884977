"""
Rate limiting configuration.

Uses slowapi to enforce per-endpoint rate limits on endpoints that call
external services. Exceeded limits raise RateLimitExceeded, an HTTP 429
error answered with the standard error envelope.

The limiter is process-wide (route decorators bind to it at import);
`configure_limiter` applies an application's settings to it.
"""

from slowapi import Limiter
from slowapi.util import get_remote_address

from recy.core.config import Settings, settings

limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[settings.rate_limit_default],
    enabled=settings.rate_limit_enabled,
)

_limits = {"heavy": settings.rate_limit_heavy}


def heavy_limit() -> str:
    """Limit for endpoints calling external services, read per request."""
    return _limits["heavy"]


def configure_limiter(app_settings: Settings) -> Limiter:
    """Apply the given settings to the shared limiter and return it."""
    limiter.enabled = app_settings.rate_limit_enabled
    _limits["heavy"] = app_settings.rate_limit_heavy
    return limiter
