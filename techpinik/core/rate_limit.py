"""Rate limiting configuration using slowapi."""

from slowapi import Limiter
from slowapi.util import get_remote_address
from starlette.requests import Request

from techpinik.core.config import get_settings

settings = get_settings()


def get_real_client_ip(request: Request) -> str:
    """Get the real client IP address, handling proxies.

    Checks X-Forwarded-For and X-Real-IP headers before falling back
    to the direct client address.
    """
    forwarded_for = request.headers.get("X-Forwarded-For")
    if forwarded_for:
        # X-Forwarded-For can contain multiple IPs: client, proxy1, proxy2
        return forwarded_for.split(",")[0].strip()

    real_ip = request.headers.get("X-Real-IP")
    if real_ip:
        return real_ip

    return get_remote_address(request)


limiter = Limiter(
    key_func=get_real_client_ip,
    default_limits=["1000/hour"],
    storage_uri=settings.rate_limit_storage_uri,
    strategy="fixed-window",
    enabled=settings.rate_limit_enabled,
)

# Checkout creates orders and reserves stock
RATE_LIMIT_CHECKOUT = "20/hour"

# Admin sign-in, prevent brute force
RATE_LIMIT_AUTH = "20/minute"
