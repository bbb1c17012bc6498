"""Authentication dependencies for API routes."""

from __future__ import annotations

import secrets
from typing import Optional

from fastapi import Depends, Request
from fastapi.security import APIKeyHeader, HTTPAuthorizationCredentials, HTTPBearer

from tasting.core.config import settings
from tasting.core.exceptions import ForbiddenError, UnauthorizedError
from tasting.core.security import verify_access_token
from tasting.models import User

_http_bearer = HTTPBearer(auto_error=False)
_api_key_header = APIKeyHeader(name="X-API-Key", auto_error=False)


async def authenticate_user(
    request: Request,
    bearer_token: Optional[HTTPAuthorizationCredentials] = Depends(_http_bearer),
    api_key: Optional[str] = Depends(_api_key_header),
) -> User:
    if bearer_token and bearer_token.credentials:
        payload = verify_access_token(bearer_token.credentials)
        subject = payload.get("sub")
        if subject is None:
            raise UnauthorizedError("Invalid token")

        user = User(
            id=str(subject),
            name=payload.get("name", subject),
            role=payload.get("role", "user"),
            attributes={key: value for key, value in payload.items() if key not in {"sub", "exp", "iat", "name", "role"}},
        )
        request.state.user = user
        return user

    if api_key:
        user = _resolve_api_key(api_key)
        if user:
            request.state.user = user
            return user

    raise UnauthorizedError("Authentication required")


async def require_admin(user: User = Depends(authenticate_user)) -> User:
    if not user.is_admin:
        raise ForbiddenError("Admin privileges required", details={"role": user.role})
    return user


def _resolve_api_key(api_key: str) -> Optional[User]:
    for index, candidate in enumerate(settings.ADMIN_API_KEYS):
        if secrets.compare_digest(api_key.encode("utf-8"), candidate.encode("utf-8")):
            return User(id=f"api-key-{index}", name="API key", role="admin")
    return None


__all__ = ["authenticate_user", "require_admin"]
