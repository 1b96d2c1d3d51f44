"""Rate limiting for the authentication endpoints using slowapi."""

import re

from fastapi import Request
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address
from starlette.responses import JSONResponse

from moneybook.core.config import settings

_UNIT_SECONDS = {"second": 1, "minute": 60, "hour": 3600, "day": 86400}


def retry_after_seconds(limit_detail: str) -> int:
    """
    Work out how long a client should wait from a slowapi limit description.

    slowapi describes limits as "X per Y <unit>" (e.g. "5 per 1 minute").

    Args:
        limit_detail: The limit description from the exception

    Returns:
        Seconds until the window resets; 60 when the detail can't be parsed
    """
    match = re.search(r"(\d+)\s+per\s+(\d+)\s+(\w+)", limit_detail)
    if not match:
        return 60

    window = int(match.group(2))
    unit = match.group(3).rstrip("s")
    return window * _UNIT_SECONDS.get(unit, 60)


def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    """
    Exception handler for rate limit exceeded errors.

    Returns the same ``{"detail", "error_code"}`` body as application errors,
    plus ``retry_after`` and a ``Retry-After`` header.
    """
    retry_after = retry_after_seconds(str(exc.detail))
    response = JSONResponse(
        status_code=429,
        content={
            "detail": f"Rate limit exceeded: {exc.detail}",
            "error_code": "RATE_LIMITED",
            "retry_after": retry_after,
        },
    )
    response.headers["Retry-After"] = str(retry_after)
    return response


limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[],  # Each endpoint sets its own limit
    enabled=settings.RATE_LIMIT_ENABLED,
    headers_enabled=False,  # Incompatible with FastAPI response models
)
