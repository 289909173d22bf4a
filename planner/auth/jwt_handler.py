"""
JWT token handler.

Issues, verifies and refreshes the signed bearer tokens handed out at
login. Tokens are stateless: nothing is persisted and nothing is revoked.
"""

import time
import logging
from typing import Any, Dict, Optional
from dataclasses import dataclass, asdict

from jose import jwt, ExpiredSignatureError, JWTError

from ..config import DEFAULT_JWT_SECRET
from ..errors import TokenExpired, TokenInvalid

logger = logging.getLogger(__name__)

# The only algorithm ever accepted; decoding is pinned to it
ALGORITHM = "HS256"
TOKEN_EXPIRE_SECONDS = 86400 * 7  # 7 days

# Never allowed into a token payload
_SECRET_FIELDS = ("password", "password_hash", "passwordHash")


@dataclass
class TokenPayload:
    """JWT token payload."""
    user: Dict[str, Any]  # Principal: id, username, firstName, lastName
    sub: str  # Username
    exp: int  # Expiration timestamp
    iat: int  # Issued at timestamp

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "TokenPayload":
        user = data.get("user")
        if not isinstance(user, dict):
            raise TokenInvalid("Token payload has no principal")
        if not isinstance(user.get("id"), str) or not isinstance(user.get("username"), str):
            raise TokenInvalid("Token principal is missing id or username")
        exp, iat = data.get("exp"), data.get("iat")
        if not isinstance(exp, int) or not isinstance(iat, int):
            raise TokenInvalid("Token is missing exp or iat")
        return cls(user=user, sub=data.get("sub", user["username"]), exp=exp, iat=iat)


class JWTHandler:
    """
    Handles JWT token generation and validation.

    One shared secret, one algorithm (HS256). Verification raises
    TokenExpired or TokenInvalid; callers at the HTTP boundary collapse
    both into a plain 401.
    """

    def __init__(self, secret_key: str = DEFAULT_JWT_SECRET, expires_in: int = TOKEN_EXPIRE_SECONDS):
        """
        Initialize JWT handler.

        Args:
            secret_key: Secret key for signing tokens
            expires_in: Default token lifetime in seconds (default: 7 days)
        """
        if not secret_key:
            raise ValueError("JWT secret key cannot be empty")
        self.secret_key = secret_key
        self.expires_in = expires_in

        if self.secret_key == DEFAULT_JWT_SECRET:
            logger.warning(
                "Using default JWT secret key. "
                "Set JWT_SECRET environment variable in production!"
            )

    def _encode(self, principal: Dict[str, Any], iat: int, exp: int) -> str:
        user = {k: v for k, v in principal.items() if k not in _SECRET_FIELDS}
        payload = TokenPayload(user=user, sub=user["username"], exp=exp, iat=iat)
        return jwt.encode(payload.to_dict(), self.secret_key, algorithm=ALGORITHM)

    def issue(self, principal: Dict[str, Any], expires_in: Optional[int] = None) -> str:
        """
        Create a signed token for a principal.

        Args:
            principal: Public user fields (id, username, firstName, lastName)
            expires_in: Custom lifetime in seconds (default: configured TTL)

        Returns:
            Encoded JWT token string
        """
        now = int(time.time())
        exp = now + (self.expires_in if expires_in is None else expires_in)

        token = self._encode(principal, now, exp)
        logger.debug(f"Issued token for {principal.get('username')}, expires in {exp - now}s")
        return token

    def verify(self, token: str) -> TokenPayload:
        """
        Verify and decode a token.

        Args:
            token: JWT token string

        Returns:
            TokenPayload if valid

        Raises:
            TokenExpired: If the token is at or past its expiry
            TokenInvalid: On a bad signature, foreign algorithm or malformed payload
        """
        try:
            data = jwt.decode(token, self.secret_key, algorithms=[ALGORITHM])
        except ExpiredSignatureError as e:
            raise TokenExpired(str(e)) from e
        except JWTError as e:
            raise TokenInvalid(str(e)) from e

        payload = TokenPayload.from_dict(data)

        # jose still accepts a token in its exact expiry second
        if payload.exp <= int(time.time()):
            raise TokenExpired("Signature has expired.")

        return payload

    def refresh(self, token: str, expires_in: Optional[int] = None) -> str:
        """
        Re-issue a valid token with a fresh expiry.

        The principal is carried over unchanged and the new expiry is never
        earlier than the old one.

        Raises:
            TokenExpired, TokenInvalid: As for verify()
        """
        payload = self.verify(token)

        now = int(time.time())
        exp = max(now + (self.expires_in if expires_in is None else expires_in), payload.exp)

        logger.debug(f"Refreshed token for {payload.sub}")
        return self._encode(payload.user, now, exp)
