from .passwords import hash_password, verify_password
from .rate_limiter import limiter, client_ip, rate_limit_exempt, LOGIN_RATE_LIMIT

__all__ = [
    "hash_password",
    "verify_password",
    "limiter",
    "client_ip",
    "rate_limit_exempt",
    "LOGIN_RATE_LIMIT",
]
