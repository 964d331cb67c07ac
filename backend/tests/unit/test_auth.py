"""
Unit tests for Cognito claim mapping and the auth dependencies.

Version: 1.0.0
"""
import pytest
from unittest.mock import AsyncMock, patch

from fastapi import HTTPException
from jose import JWTError

from app.core.auth import authenticate_token, require_admin, require_admin_or_manager
from app.core.cognito import extract_user_info, get_signing_key, resolve_role


pytestmark = pytest.mark.unit


class TestResolveRole:

    def test_custom_claim_wins(self):
        assert resolve_role({"custom:role": " Manager ", "cognito:groups": ["admin"]}) == "manager"

    def test_highest_group(self):
        assert resolve_role({"cognito:groups": ["user", "Admin"]}) == "admin"

    def test_unknown_claim_falls_back_to_groups(self):
        assert resolve_role({"custom:role": "root", "cognito:groups": ["manager"]}) == "manager"

    def test_default_role(self):
        assert resolve_role({}) == "user"

    def test_extract_user_info(self):
        user = extract_user_info({
            "sub": "abc",
            "username": "jdoe",
            "email": "j@test.com",
            "cognito:groups": ["manager"],
        })
        assert user == {
            "user_id": "abc",
            "username": "jdoe",
            "email": "j@test.com",
            "groups": ["manager"],
            "role": "manager",
        }


class TestGetSigningKey:

    def test_unreadable_token(self):
        assert get_signing_key("not-a-token", {"keys": []}) is None


class TestAuthenticateToken:

    @pytest.mark.asyncio
    async def test_valid_token(self):
        payload = {"sub": "abc", "username": "jdoe", "cognito:groups": ["admin"]}
        with patch("app.core.auth.verify_cognito_token", new=AsyncMock(return_value=payload)):
            user = await authenticate_token("token")

        assert user["user_id"] == "abc"
        assert user["role"] == "admin"

    @pytest.mark.asyncio
    async def test_jwt_error_is_401(self):
        with patch("app.core.auth.verify_cognito_token", new=AsyncMock(side_effect=JWTError("expired"))):
            with pytest.raises(HTTPException) as exc_info:
                await authenticate_token("token")

        assert exc_info.value.status_code == 401
        assert exc_info.value.detail["code"] == "UNAUTHORIZED"

    @pytest.mark.asyncio
    async def test_missing_sub_is_401(self):
        with patch("app.core.auth.verify_cognito_token", new=AsyncMock(return_value={"username": "x"})):
            with pytest.raises(HTTPException) as exc_info:
                await authenticate_token("token")

        assert exc_info.value.status_code == 401


class TestRoleGates:

    @pytest.mark.asyncio
    async def test_admin_passes_admin_gate(self, admin_user):
        assert await require_admin(user=admin_user) is admin_user

    @pytest.mark.asyncio
    async def test_manager_blocked_from_admin_gate(self, manager_user):
        with pytest.raises(HTTPException) as exc_info:
            await require_admin(user=manager_user)
        assert exc_info.value.status_code == 403

    @pytest.mark.asyncio
    async def test_manager_passes_mutation_gate(self, manager_user):
        assert await require_admin_or_manager(user=manager_user) is manager_user

    @pytest.mark.asyncio
    async def test_viewer_blocked_from_mutation_gate(self, viewer_user):
        with pytest.raises(HTTPException):
            await require_admin_or_manager(user=viewer_user)
