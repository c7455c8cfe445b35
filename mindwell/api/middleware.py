"""API middleware for rate limiting and CORS"""
import logging
from datetime import datetime
from fastapi import Request
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from slowapi import Limiter
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded

from mindwell.config import CORS_ORIGINS

logger = logging.getLogger(__name__)

# Per-route limits (per client IP)
WRITE_LIMIT = "30/minute"
READ_LIMIT = "30/minute"
CATALOG_LIMIT = "60/minute"
SETTINGS_LIMIT = "10/minute"
HEALTH_LIMIT = "60/minute"

limiter = Limiter(key_func=get_remote_address)


async def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    """429 in the same shape as other API errors"""
    logger.warning(f"Rate limit exceeded for {get_remote_address(request)} on {request.url.path}")
    return JSONResponse(
        status_code=429,
        content={
            "error": "RateLimitExceeded",
            "message": f"Rate limit exceeded: {exc.detail}",
            "user_message": "Too many requests. Please slow down and try again shortly.",
            "timestamp": datetime.now().isoformat(),
        }
    )


def setup_cors(app):
    """Configure CORS middleware"""
    cors_origins = [origin.strip() for origin in CORS_ORIGINS if origin.strip()]

    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT"],
        allow_headers=["Authorization", "Content-Type"],
    )

    logger.info(f"CORS configured for origins: {cors_origins}")


def setup_rate_limiting(app):
    """Attach the limiter and its 429 handler"""
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)
    logger.info(f"Rate limiting configured: writes {WRITE_LIMIT}, catalog {CATALOG_LIMIT} per IP")
