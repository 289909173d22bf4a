"""
User endpoints.

Signup at the collection root and the current user's profile.
"""

from typing import Any

from fastapi import APIRouter, Body, status

from ..deps import CurrentPrincipal, ServicesDep, unauthorized
from .auth import UserResponse, signup_user

router = APIRouter()


@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def create_user(services: ServicesDep, body: Any = Body(None)):
    """Register a new user (same rules as /auth/signup)."""
    return await signup_user(body, services)


@router.get("/me", response_model=UserResponse)
async def get_current_user_info(principal: CurrentPrincipal, services: ServicesDep):
    """
    Get current authenticated user info.

    Requires a valid token whose user still exists.
    """
    user = await services.user_auth.get_current_user(principal.id)
    if user is None:
        raise unauthorized()
    return UserResponse(**user.serialize())
