"""
Authentication endpoints.

Handles signup, login and token refresh.
"""

import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, HTTPException, status
from pydantic import BaseModel

from ..deps import BearerToken, ServicesDep, Services, unauthorized

logger = logging.getLogger(__name__)

router = APIRouter()


# Request/Response models

class TokenResponse(BaseModel):
    """Token response."""
    authToken: str


class UserResponse(BaseModel):
    """Public user profile."""
    id: str
    username: str
    firstName: str
    lastName: str


async def signup_user(body: Any, services: Services) -> UserResponse:
    """Shared by /auth/signup and POST /users. Raises ValidationError on bad input."""
    result = await services.user_auth.signup(body)
    if not result.success:
        raise result.error
    return UserResponse(**result.user.serialize())


# Endpoints

@router.post("/signup", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def signup(services: ServicesDep, body: Any = Body(None)):
    """
    Register a new user.

    Returns the public profile; the password is never echoed back.
    """
    return await signup_user(body, services)


@router.post("/login", response_model=TokenResponse)
async def login(services: ServicesDep, body: Optional[Dict[str, Any]] = Body(None)):
    """
    Login with username and password.

    Returns a signed auth token on success.
    """
    credentials = body or {}
    username = credentials.get("username")
    password = credentials.get("password")
    if not isinstance(username, str) or not isinstance(password, str) or not username or not password:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Bad Request")

    result = await services.user_auth.login(username, password)
    if not result.success:
        raise unauthorized()

    return TokenResponse(authToken=result.token)


@router.post("/refresh", response_model=TokenResponse)
async def refresh_token(token: BearerToken, services: ServicesDep):
    """
    Refresh an auth token.

    Send the current token as a Bearer header; the new one expires no
    earlier than the old one.
    """
    result = await services.user_auth.refresh(token)
    if not result.success:
        raise unauthorized()

    return TokenResponse(authToken=result.token)
