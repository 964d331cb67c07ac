"""
AWS Cognito JWT validation for dashboard users.

Fetches the user pool JWKS, verifies access tokens and maps Cognito
claims onto the dashboard's three roles (admin, manager, user).
"""
import time
import logging
from typing import List, Optional

import httpx
from jose import jwt, jwk, JWTError

from app.core.config import get_settings

logger = logging.getLogger(__name__)

JWKS_CACHE_TTL = 3600  # 1 hour

# Highest privilege first
ROLES: List[str] = ["admin", "manager", "user"]
DEFAULT_ROLE = "user"

_jwks_cache: dict = {}
_jwks_cache_time: float = 0


async def get_jwks() -> dict:
    """Return the pool JWKS, refetching when the cached copy is older than an hour."""
    global _jwks_cache, _jwks_cache_time

    settings = get_settings()
    now = time.time()
    if _jwks_cache and (now - _jwks_cache_time) < JWKS_CACHE_TTL:
        return _jwks_cache

    try:
        async with httpx.AsyncClient(timeout=10.0) as client:
            response = await client.get(settings.cognito_jwks_url)
            response.raise_for_status()
    except httpx.HTTPError as e:
        logger.error(f"Failed to fetch Cognito JWKS: {e}")
        if _jwks_cache:
            logger.warning("Using stale JWKS cache")
            return _jwks_cache
        raise

    _jwks_cache = response.json()
    _jwks_cache_time = now
    logger.info("Fetched Cognito JWKS")
    return _jwks_cache


def get_signing_key(token: str, jwks: dict) -> Optional[dict]:
    """Find the JWK whose kid matches the token header."""
    try:
        kid = jwt.get_unverified_headers(token).get("kid")
    except JWTError as e:
        logger.warning(f"Unreadable token header: {e}")
        return None

    if not kid:
        logger.warning("Token missing 'kid' header")
        return None

    for key in jwks.get("keys", []):
        if key.get("kid") == kid:
            return key

    logger.warning(f"No matching key found for kid: {kid}")
    return None


async def verify_cognito_token(token: str) -> dict:
    """
    Verify a Cognito access token and return its claims.

    Raises:
        JWTError: signature, expiry, issuer, token_use or client_id mismatch
    """
    settings = get_settings()
    signing_key = get_signing_key(token, await get_jwks())
    if not signing_key:
        raise JWTError("Unable to find signing key for token")

    try:
        public_key = jwk.construct(signing_key)
    except Exception as e:
        raise JWTError(f"Invalid signing key: {e}")

    payload = jwt.decode(
        token,
        public_key,
        algorithms=["RS256"],
        issuer=settings.cognito_issuer,
        options={"verify_aud": False},  # access tokens carry client_id, not aud
    )

    if payload.get("token_use") != "access":
        raise JWTError(f"Invalid token_use: expected 'access', got '{payload.get('token_use')}'")

    if settings.cognito_app_client_id and payload.get("client_id") != settings.cognito_app_client_id:
        raise JWTError("Token client_id does not match configured app client")

    return payload


def resolve_role(payload: dict) -> str:
    """Pick the dashboard role from a custom claim or the highest-ranked group."""
    claimed = (payload.get("custom:role") or "").strip().lower()
    if claimed in ROLES:
        return claimed

    groups = [g.lower() for g in payload.get("cognito:groups", [])]
    for role in ROLES:
        if role in groups:
            return role
    return DEFAULT_ROLE


def extract_user_info(payload: dict) -> dict:
    """Map verified claims onto the user dict handed to route handlers."""
    return {
        "user_id": payload.get("sub"),
        "username": payload.get("username"),
        "email": payload.get("email"),
        "groups": payload.get("cognito:groups", []),
        "role": resolve_role(payload),
    }
