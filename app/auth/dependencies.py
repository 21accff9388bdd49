import logging
import uuid
from typing import Annotated

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from app.auth.models.user import User
from app.auth.permissions import Action, authorize
from app.core import security
from app.core.exceptions import ForbiddenError, UnauthorizedError
from app.db.session import get_db

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


async def get_access_token(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
) -> str:
    """Extract the bearer token from the Authorization header"""
    if credentials is None or not credentials.credentials:
        raise UnauthorizedError("Not authenticated")
    return credentials.credentials


def get_validated_token_payload(token: str, expected_type: str = "access") -> dict:
    """Decode and validate JWT token"""
    payload = security.decode_token(token)

    if payload is None:
        raise UnauthorizedError("Could not validate credentials")

    if payload.get("type") != expected_type:
        raise UnauthorizedError(f"Invalid token type, expected {expected_type}")

    return payload


async def get_current_user(
    access_token: str = Depends(get_access_token),
    db: Session = Depends(get_db),
) -> User:
    """Get current authenticated user from access token"""
    payload = get_validated_token_payload(access_token, expected_type="access")

    user_id: str | None = payload.get("sub")
    if user_id is None:
        raise UnauthorizedError("Could not validate credentials")

    user = db.query(User).filter(User.id == _parse_uuid(user_id)).first()
    if user is None or user.is_deleted:
        raise UnauthorizedError("User not found")

    if not user.is_active:
        raise ForbiddenError("Account is suspended")

    return user


def _parse_uuid(value: str) -> uuid.UUID:
    try:
        return uuid.UUID(value)
    except ValueError as e:
        raise UnauthorizedError("Could not validate credentials") from e


class RequirePermission:
    """Dependency class that lets the request through only if the role holds ``action``."""

    def __init__(self, action: Action):
        self.action = action

    def __call__(self, current_user: User = Depends(get_current_user)) -> User:
        if not authorize(current_user, self.action):
            logger.info(
                "permission_denied",
                extra={"user_id": str(current_user.id), "action": self.action.value},
            )
            raise ForbiddenError("You do not have permission to perform this action")
        return current_user


require_admin = RequirePermission(Action.MANAGE_USERS)
require_super_admin = RequirePermission(Action.MANAGE_ADMINS)


async def get_optional_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
    db: Session = Depends(get_db),
) -> User | None:
    """Resolve the caller on public endpoints; anonymous requests yield None"""
    if credentials is None or not credentials.credentials:
        return None
    return await get_current_user(credentials.credentials, db)
