"""
User authentication service.

Signup, login, refresh and bearer token checks as linear async
pipelines. Each step's expected failure is returned in an AuthResult
rather than raised; anything unexpected is logged and propagates.
"""

import logging
from typing import Any, Optional
from dataclasses import dataclass

from ..auth import Authenticator, JWTHandler, TokenPayload, UserStore, User, validate_signup
from ..errors import InvalidCredentials, PlannerError, TokenError, ValidationError

logger = logging.getLogger(__name__)


@dataclass
class AuthResult:
    """Authentication result."""
    success: bool
    token: Optional[str] = None
    user: Optional[User] = None
    error: Optional[PlannerError] = None


class UserAuthService:
    """
    Service for user authentication.

    Handles:
    - User signup (username + password + optional names)
    - Login with password
    - Token refresh
    - Bearer token verification for protected routes
    """

    def __init__(self, jwt_handler: JWTHandler, user_store: UserStore):
        """
        Initialize auth service.

        Args:
            jwt_handler: Token issuer
            user_store: Credential store
        """
        self.jwt = jwt_handler
        self.users = user_store
        self.authenticator = Authenticator(user_store)

    async def signup(self, body: Any) -> AuthResult:
        """
        Validate a signup body and create the user.

        Args:
            body: Raw request body; anything but a JSON object counts as empty

        Returns:
            AuthResult with the new user, or a ValidationError
        """
        try:
            fields = validate_signup(body)
            user = await self.users.create_user(**fields)
        except ValidationError as e:
            logger.info(f"Signup rejected: {e.message} ({e.location})")
            return AuthResult(success=False, error=e)
        except Exception:
            logger.exception("Signup failed")
            raise

        logger.info(f"User signed up: {user.username}")
        return AuthResult(success=True, user=user)

    async def login(self, username: str, password: str) -> AuthResult:
        """
        Login with username and password.

        Returns:
            AuthResult with a token if successful, InvalidCredentials otherwise
        """
        try:
            user = await self.authenticator.authenticate(username, password)
        except InvalidCredentials as e:
            return AuthResult(success=False, error=e)
        except Exception:
            logger.exception("Login failed")
            raise

        token = self.jwt.issue(user.to_principal())

        logger.info(f"User logged in: {user.username}")
        return AuthResult(success=True, token=token, user=user)

    async def refresh(self, token: str) -> AuthResult:
        """
        Exchange a valid token for one with a later expiry.

        Returns:
            AuthResult with the new token, or the TokenError that stopped it
        """
        try:
            new_token = self.jwt.refresh(token)
        except TokenError as e:
            logger.debug(f"Token refresh rejected ({type(e).__name__}): {e}")
            return AuthResult(success=False, error=e)

        return AuthResult(success=True, token=new_token)

    def verify_access_token(self, token: str) -> Optional[TokenPayload]:
        """
        Verify a bearer token.

        Returns:
            TokenPayload if valid, None otherwise
        """
        try:
            return self.jwt.verify(token)
        except TokenError as e:
            logger.debug(f"Bearer token rejected ({type(e).__name__}): {e}")
            return None

    async def get_current_user(self, user_id: str) -> Optional[User]:
        """Load the stored user behind a verified principal."""
        return await self.users.get_by_id(user_id)
