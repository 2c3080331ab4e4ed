#  Agent Dashboard - Auth Middleware
#
#  FastAPI dependency for bearer-token authentication.
#  get_current_user: validates the token, upserts the caller (refreshing
#  last_signed_in) and returns the user row.
#
#  Depends on: dashboard/services/auth.py, dashboard/services/users.py, container.py
#  Used by:    app.py, routes/*

import logging

import jwt
from dependency_injector.wiring import inject, Provide
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from dashboard.container import Container
from dashboard.exceptions import internal_errors
from dashboard.logging_config import set_user_id
from dashboard.models.schemas import UserUpsert
from dashboard.services.auth import PROFILE_CLAIMS, AuthService
from dashboard.services.users import UserService

logger = logging.getLogger("dashboard.auth")

_bearer_scheme = HTTPBearer(auto_error=False)


@inject
async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(_bearer_scheme),
    auth: AuthService = Depends(Provide[Container.auth]),
    users: UserService = Depends(Provide[Container.users]),
) -> dict:
    """Validate Bearer token and return user dict. Raises 401 on failure."""
    if not credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )

    try:
        payload = auth.decode_token(credentials.credentials)
    except jwt.PyJWTError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        )

    open_id = payload["sub"]
    profile = {k: payload[k] for k in PROFILE_CLAIMS if isinstance(payload.get(k), str)}

    with internal_errors("Failed to load user"):
        await users.upsert_user(UserUpsert(open_id=open_id, **profile))
        user = await users.get_user_by_open_id(open_id)

    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found",
        )

    set_user_id(user["id"])
    return user
