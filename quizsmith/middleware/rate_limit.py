"""
Rate limiting middleware using slowapi
"""
import structlog
from fastapi import Request
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address

from quizsmith.config import settings

logger = structlog.get_logger()

limiter = Limiter(
    key_func=get_remote_address,
    default_limits=["1000/hour", "100/minute"],
    enabled=settings.rate_limit_enabled,
)


def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    """Custom rate limit exceeded handler"""
    logger.warning("rate_limit_exceeded", client_ip=get_remote_address(request), detail=exc.detail)
    return JSONResponse(
        status_code=429,
        content={"detail": f"Rate limit exceeded: {exc.detail}. Please try again later."},
    )


def quiz_generation_limit():
    """Rate limit for question generation endpoints"""
    return limiter.limit(settings.generation_rate_limit)


def general_api_limit():
    """Rate limit for session and scoring endpoints"""
    return limiter.limit("120/minute")
