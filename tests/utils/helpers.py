from typing import Any

import httpx
from jose import jwt

from app.auth.models.user import User
from app.core.config import settings
from app.core.security import create_access_token, token_payload_for


def token_for(user: User) -> str:
    return create_access_token(token_payload_for(user))


def create_auth_headers(token: str) -> dict[str, str]:
    """Create Authorization headers with Bearer token."""
    return {"Authorization": f"Bearer {token}"}


def auth_headers_for(user: User) -> dict[str, str]:
    return create_auth_headers(token_for(user))


def assert_user_response_valid(data: dict[str, Any]) -> None:
    assert "id" in data
    assert "email" in data
    assert "first_name" in data
    assert "last_name" in data
    assert "role" in data
    assert "hashed_password" not in data


def assert_error_response(response: httpx.Response, status_code: int, code: str) -> None:
    """Assert the standard ``{"success": false, "error": {...}}`` error envelope."""
    assert response.status_code == status_code, response.text
    body = response.json()
    assert body["success"] is False
    assert body["error"]["code"] == code


def decode_jwt_token(token: str) -> dict[str, Any]:
    return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
