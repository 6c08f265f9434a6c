"""
Rate limiting configuration
"""

from fastapi import Request
from slowapi import Limiter
from slowapi.util import get_remote_address


def get_real_ip(request: Request) -> str:
    """
    Get the real IP address, considering proxy headers.
    Required when running behind a load balancer.
    """
    forwarded_for = request.headers.get("X-Forwarded-For")
    if forwarded_for:
        # X-Forwarded-For can contain multiple IPs, take the first
        return forwarded_for.split(",")[0].strip()

    real_ip = request.headers.get("X-Real-IP")
    if real_ip:
        return real_ip

    return get_remote_address(request)


def create_limiter(enabled: bool = True) -> Limiter:
    """One limiter per app, so counters and the on/off switch are not shared"""
    return Limiter(key_func=get_real_ip, enabled=enabled)


RATE_LIMIT_MESSAGE = "Too many requests. Please wait a moment and try again."
