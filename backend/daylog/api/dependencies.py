"""
Request dependencies shared by protected routes.
"""
from typing import Optional
from fastapi import Depends, Header
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from daylog.services import auth_service

bearer_scheme = HTTPBearer(auto_error=False)


def get_current_user_id(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    x_auth_token: Optional[str] = Header(None)
) -> int:
    """
    Resolve the request's session token to the owning user id.

    Reads `Authorization: Bearer <token>`, falling back to the legacy
    `x-auth-token` header. Runs before any store access.
    """
    token = credentials.credentials if credentials else x_auth_token
    return auth_service.resolve_owner(token)
