"""
Username/password authentication.

Unknown usernames and wrong passwords fail with the same error and take
roughly the same time, so callers cannot tell which one happened.
"""

import logging
from typing import Optional

from ..errors import InvalidCredentials
from .password import PasswordHandler
from .users import User, UserStore

logger = logging.getLogger(__name__)


class Authenticator:
    """Checks credentials against the user store. Read-only."""

    def __init__(self, users: UserStore, password_handler: Optional[PasswordHandler] = None):
        self.users = users
        self.password_handler = password_handler or users.password_handler
        self._dummy_hash: Optional[str] = None

    async def _burn_verify(self, password: str):
        # Equalize timing with the found-user path
        if self._dummy_hash is None:
            self._dummy_hash = await self.password_handler.hash_async("not-a-real-password")
        await self.password_handler.verify_async(password or "x", self._dummy_hash)

    async def authenticate(self, username: str, password: str) -> User:
        """
        Verify a username and password.

        Args:
            username: Username as submitted
            password: Plain text password as submitted

        Returns:
            The matching User

        Raises:
            InvalidCredentials: If the user is unknown or the password is wrong
        """
        user = await self.users.get_by_username(username)
        if user is None:
            await self._burn_verify(password)
            logger.debug("Login rejected: unknown username")
            raise InvalidCredentials()

        if not await self.password_handler.verify_async(password, user.password_hash):
            logger.debug("Login rejected: password mismatch")
            raise InvalidCredentials()

        if self.password_handler.needs_rehash(user.password_hash):
            await self._rehash(user, password)

        return user

    async def _rehash(self, user: User, password: str):
        # The plaintext is only available here, right after a successful check
        user.password_hash = await self.password_handler.hash_async(password)
        await self.users.update_password_hash(user.user_id, user.password_hash)
        logger.info(f"Rehashed password for {user.username} at cost {self.password_handler.rounds}")
