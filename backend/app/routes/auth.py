"""
Authentication API endpoints.

Provides:
- GET /api/auth/me - Get current user info and role
"""

import logging
from fastapi import APIRouter, Depends

from app.schemas.auth import User
from app.core.auth import get_current_user

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


@router.get("/me", response_model=User)
async def get_me(current_user: dict = Depends(get_current_user)):
    """
    Get current authenticated user info.

    Requires a valid Cognito access token in the Authorization header.
    """
    return User(**current_user)
