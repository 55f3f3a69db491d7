"""Per-client request quota shared by the profile and account endpoints."""

from fastapi import Request
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address

from core.config import settings
from core.exceptions import ErrorCode

FORWARDED_FOR_HEADER = "X-Forwarded-For"


def client_key(request: Request) -> str:
    """Identify the caller for quota accounting."""
    if settings.rate_limit_trust_proxy:
        forwarded = request.headers.get(FORWARDED_FOR_HEADER, "")
        first_hop = forwarded.split(",")[0].strip()
        if first_hop:
            return first_hop
    return get_remote_address(request)


limiter = Limiter(key_func=client_key, enabled=settings.rate_limit_enabled)


async def rate_limit_exceeded_handler(request: Request, exc: Exception) -> JSONResponse:
    """Reject the request once the caller's window is used up."""
    limit = exc.detail if isinstance(exc, RateLimitExceeded) else str(exc)
    return JSONResponse(
        status_code=429,
        content={
            "error_code": ErrorCode.RATE_LIMIT_EXCEEDED.value,
            "message": "Too many requests, please try again later.",
            "details": {"limit": limit},
        },
    )
