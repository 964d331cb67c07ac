"""
Authentication schemas for request/response validation.
"""

from typing import List, Optional
from pydantic import BaseModel, Field


class User(BaseModel):
    """Current user as resolved from the Cognito access token."""
    user_id: str = Field(..., description="Cognito subject")
    username: Optional[str] = Field(None, description="Username")
    email: Optional[str] = Field(None, description="Email, when present in the token")
    groups: List[str] = Field(default_factory=list, description="Cognito groups")
    role: str = Field(..., description="admin, manager or user")
