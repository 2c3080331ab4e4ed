#  Agent Dashboard - Auth Routes
#
#  Caller profile. Sign-in happens upstream; the bearer token is only
#  verified here.
#
#  Depends on: middleware/auth.py, models/schemas.py
#  Used by:    app.py

from fastapi import APIRouter, Depends

from dashboard.middleware.auth import get_current_user
from dashboard.models.schemas import UserOut

router = APIRouter(prefix="/auth", tags=["auth"])


@router.get("/me")
async def get_me(current_user: dict = Depends(get_current_user)) -> UserOut:
    """Return the authenticated caller's profile."""
    return UserOut(**current_user)
