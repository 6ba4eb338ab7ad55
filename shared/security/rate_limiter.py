import os

from slowapi import Limiter
from slowapi.util import get_remote_address
from fastapi import Request

LOGIN_RATE_LIMIT = os.getenv("LOGIN_RATE_LIMIT", "10/minute")


def client_ip(request: Request) -> str:
    """
    Key function for SlowAPI.
    No tokens are issued, so every caller is keyed by address
    (handles proxies if X-Forwarded-For is set correctly by Uvicorn).
    """
    return f"ip:{get_remote_address(request)}"


def rate_limit_exempt(request: Request) -> bool:
    """Exempts requests to an app whose settings switch rate limiting off."""
    return not request.app.state.settings.rate_limit_enabled


limiter = Limiter(key_func=client_ip)
