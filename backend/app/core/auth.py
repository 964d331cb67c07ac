"""
Authentication — Cognito bearer tokens and role gates for route protection.

Roles:
- admin:   everything, including manual status patches and audit logs
- manager: brand/domain mutations and bulk import
- user:    read-only dashboard access
"""
import logging
from typing import List
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError
from app.core.cognito import verify_cognito_token, extract_user_info

logger = logging.getLogger(__name__)
security = HTTPBearer()


async def authenticate_token(token: str) -> dict:
    """
    Verify a raw token and return user data.

    Shared by HTTP routes and the real-time socket endpoint.
    Raises HTTPException(401) on any verification failure.
    """
    try:
        payload = await verify_cognito_token(token)
    except JWTError as e:
        logger.warning(f"Authentication failed - JWT error: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={
                "code": "UNAUTHORIZED",
                "message": f"Invalid or expired token: {str(e)}",
            },
        )
    except Exception as e:
        logger.error(f"Authentication failed - unexpected error: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={
                "code": "UNAUTHORIZED",
                "message": "Authentication failed",
            },
        )

    user = extract_user_info(payload)
    if not user.get("user_id"):
        logger.warning("Authentication failed - missing user ID in token")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={
                "code": "UNAUTHORIZED",
                "message": "Invalid token: missing user ID",
            },
        )

    logger.debug(f"Authentication successful - user_id: {user['user_id']}, role: {user['role']}")
    return user


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
) -> dict:
    """Validate the bearer token and return the caller."""
    return await authenticate_token(credentials.credentials)


def require_roles(allowed_roles: List[str]):
    """
    Dependency factory for requiring one of the given roles.

    Usage:
        @router.delete("/{id}")
        async def remove(user: dict = Depends(require_roles(["admin", "manager"]))):
            ...
    """
    async def check_role(user: dict = Depends(get_current_user)) -> dict:
        if user.get("role") not in allowed_roles:
            logger.warning(
                f"Access denied - user {user.get('user_id')} has role {user.get('role')}, "
                f"needs one of: {allowed_roles}"
            )
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail={
                    "code": "FORBIDDEN",
                    "message": f"Access denied. Required role: {' or '.join(allowed_roles)}",
                },
            )
        return user

    return check_role


# Pre-configured dependencies for the dashboard's role gates
require_admin = require_roles(["admin"])
require_admin_or_manager = require_roles(["admin", "manager"])
