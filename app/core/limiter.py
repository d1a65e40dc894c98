# File: app/core/limiter.py

from fastapi import Request
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address

from app.core.config import settings
from app.core.security import jwt_manager

# moving-window is the sliding-window strategy of the `limits` package
limiter = Limiter(
    key_func=get_remote_address,
    storage_uri=settings.limiter_storage_uri,
    default_limits=[settings.redis_rate_limit],
    strategy="moving-window",
    key_prefix="ratelimit",
)


def ai_tutor_key(request: Request) -> str:
    """
    Rate limit key for the AI tutor endpoints.
    Authenticated callers are limited per user, anonymous ones per IP address.
    """
    auth_header = request.headers.get("Authorization", "")
    if auth_header.lower().startswith("bearer "):
        payload = jwt_manager.decode_token(auth_header[7:].strip())
        if payload and payload.get("sub"):
            return f"ai_tutor:user:{payload['sub']}"
    return f"ai_tutor:ip:{get_remote_address(request)}"


async def custom_rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded):
    """
    Custom exception handler for rate-limited requests to return a JSON response.
    """
    return JSONResponse(
        status_code=429,
        content={
            "detail": f"Too Many Requests: rate limit exceeded ({exc.detail})",
            "message": "You have made too many requests in a short period. Please try again later.",
        },
    )
