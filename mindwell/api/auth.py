"""Bearer API key authentication for the progression API"""
import hmac
import os
import logging
from fastapi import HTTPException, Security, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

logger = logging.getLogger(__name__)

security = HTTPBearer()


def get_api_keys() -> list[str]:
    """Comma-separated API_KEYS, read on every call"""
    raw = os.getenv("API_KEYS", "")
    keys = [key.strip() for key in raw.split(",") if key.strip()]
    if not keys:
        logger.warning("No API_KEYS configured in environment")
    return keys


def _matches_any(candidate: str, keys: list[str]) -> bool:
    # constant-time over all keys
    matched = False
    for key in keys:
        if hmac.compare_digest(candidate.encode(), key.encode()):
            matched = True
    return matched


async def verify_api_key(
    credentials: HTTPAuthorizationCredentials = Security(security)
) -> str:
    """
    FastAPI dependency guarding every /api/v1 route

    Raises:
        HTTPException: 503 when the server has no keys configured,
            401 when the presented key is not one of them
    """
    valid_keys = get_api_keys()
    if not valid_keys:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="API authentication not configured"
        )

    presented = credentials.credentials
    if not _matches_any(presented, valid_keys):
        logger.warning(f"Rejected API key ending in ...{presented[-4:]}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid API key"
        )

    return presented
