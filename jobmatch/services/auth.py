"""
Bearer-token resolution against the hosted auth provider.
"""
import asyncio
from typing import Optional

import requests
from fastapi import Header, HTTPException

from jobmatch.config import AUTH_URL, AUTH_API_KEY, LLM_TIMEOUT, is_simple_mode
from jobmatch.models.models import AuthUser
from jobmatch.utils.exceptions import AuthenticationError
from jobmatch.utils.logging_config import get_logger

logger = get_logger(__name__)


def fetch_auth_user(token: str) -> AuthUser:
    """Resolve a bearer token to the provider's user record."""
    try:
        resp = requests.get(
            f"{AUTH_URL.rstrip('/')}/user",
            headers={"Authorization": f"Bearer {token}", "apikey": AUTH_API_KEY},
            timeout=LLM_TIMEOUT,
        )
    except requests.RequestException as e:
        raise AuthenticationError(cause=e)
    if resp.status_code != 200:
        raise AuthenticationError(details={"status_code": resp.status_code})

    try:
        data = resp.json()
    except ValueError as e:
        raise AuthenticationError(cause=e)
    if not isinstance(data, dict) or not data.get("id"):
        raise AuthenticationError()
    metadata = data.get("user_metadata")
    if not isinstance(metadata, dict):
        metadata = {}
    return AuthUser(id=data["id"], email=data.get("email"), full_name=metadata.get("full_name"))


async def get_current_user(authorization: Optional[str] = Header(None)) -> AuthUser:
    if not authorization or not authorization.lower().startswith("bearer "):
        raise HTTPException(status_code=401, detail="Unauthorized")
    token = authorization[7:].strip()
    loop = asyncio.get_running_loop()
    try:
        return await loop.run_in_executor(None, fetch_auth_user, token)
    except AuthenticationError as e:
        logger.info(f"Rejected bearer token: {e.details or e.cause}")
        raise HTTPException(status_code=401, detail="Unauthorized")


def require_full_mode(feature: str):
    """Dependency factory: database-backed routes answer 503 in simple mode."""
    async def dependency():
        if is_simple_mode():
            raise HTTPException(
                status_code=503,
                detail={
                    "error": "This feature requires database authentication",
                    "message": f"{feature} is not available in simple mode. "
                               "Use /api/simple-analyze and /api/simple-jobs instead.",
                },
            )
    return dependency
