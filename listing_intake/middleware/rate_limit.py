import os

from fastapi import Request, Response
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address

# "redis://host:6379" to share counters between instances
storage_uri = os.getenv("RATE_LIMIT_STORAGE_URI", "memory://")


# No accounts in this API, so every client is limited by IP
limiter = Limiter(
    key_func=get_remote_address,
    default_limits=["1000 per day", "200 per hour"],
    storage_uri=storage_uri,
)


# Custom rate limit exceeded handler
def custom_rate_limit_handler(request: Request, exc: RateLimitExceeded) -> Response:
    retry_seconds = 60  # Default to 60 seconds

    # Extract time period from detail (e.g., "1 minute", "1 hour")
    if "minute" in str(exc.detail):
        retry_seconds = 60
    elif "hour" in str(exc.detail):
        retry_seconds = 3600
    elif "day" in str(exc.detail):
        retry_seconds = 86400
    elif "second" in str(exc.detail):
        retry_seconds = 1

    return JSONResponse(
        status_code=429,
        content={
            "status": "error",
            "message": f"Too many requests. Please try again in {retry_seconds} seconds.",
            "retry_after": retry_seconds,
        },
        headers={"Retry-After": str(retry_seconds)},
    )
