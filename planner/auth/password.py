"""
Password hashing for stored credentials.

bcrypt with a configurable cost; the async variants run the hashing
in a worker thread so request handlers never block the event loop.
"""

import asyncio
import logging

import bcrypt

logger = logging.getLogger(__name__)

# Default cost factor, overridable via BCRYPT_ROUNDS
BCRYPT_ROUNDS = 12

# bcrypt only looks at the first 72 bytes of its input
BCRYPT_MAX_BYTES = 72


class PasswordHandler:
    """
    Hashes and checks passwords for the user store.

    The handler keeps no mutable state, so one instance can serve
    concurrent requests.

    Usage:
        handler = PasswordHandler(rounds=12)
        stored = handler.hash("correct horse battery")
        ok = handler.verify("correct horse battery", stored)
    """

    def __init__(self, rounds: int = BCRYPT_ROUNDS):
        """
        Set up the handler.

        Args:
            rounds: bcrypt cost factor; each step doubles the work
        """
        self.rounds = rounds

    def hash(self, password: str) -> str:
        """
        Hash a password with a fresh salt.

        Args:
            password: Plain text password

        Returns:
            bcrypt hash string, safe to store

        Raises:
            ValueError: If the password is empty or longer than 72 bytes
        """
        if not password:
            raise ValueError("Password cannot be empty")

        encoded = password.encode("utf-8")
        if len(encoded) > BCRYPT_MAX_BYTES:
            raise ValueError(f"Password cannot be longer than {BCRYPT_MAX_BYTES} bytes")

        salt = bcrypt.gensalt(rounds=self.rounds)
        hashed = bcrypt.hashpw(encoded, salt)

        return hashed.decode("utf-8")

    def verify(self, password: str, hashed: str) -> bool:
        """
        Check a password against a stored hash.

        Args:
            password: Plain text password to verify
            hashed: Previously hashed password

        Returns:
            True on a match. Malformed or oversized input gives False.
        """
        if not password or not hashed:
            return False

        encoded = password.encode("utf-8")
        if len(encoded) > BCRYPT_MAX_BYTES:
            return False

        try:
            return bcrypt.checkpw(encoded, hashed.encode("utf-8"))
        except ValueError as e:
            logger.warning(f"Password verification error: {e}")
            return False

    async def hash_async(self, password: str) -> str:
        """Hash in a worker thread so the event loop stays responsive."""
        return await asyncio.to_thread(self.hash, password)

    async def verify_async(self, password: str, hashed: str) -> bool:
        """Verify in a worker thread so the event loop stays responsive."""
        return await asyncio.to_thread(self.verify, password, hashed)

    def needs_rehash(self, hashed: str) -> bool:
        """
        Tell whether a stored hash was made with a different cost.

        Args:
            hashed: Previously hashed password

        Returns:
            True if the hash should be replaced on next login
        """
        # bcrypt hash format: $2b$rounds$salt+hash
        parts = hashed.split("$")
        if len(parts) < 3:
            return True
        try:
            return int(parts[2]) != self.rounds
        except ValueError:
            return True
