"""
Authentication module for the Planner API.

Provides bcrypt password hashing, username/password authentication
and stateless JWT issuance, verification and refresh.
"""

from .authenticator import Authenticator
from .jwt_handler import JWTHandler, TokenPayload
from .password import PasswordHandler
from .users import UserStore, User
from .validation import validate_signup

__all__ = [
    "Authenticator",
    "JWTHandler",
    "TokenPayload",
    "PasswordHandler",
    "UserStore",
    "User",
    "validate_signup",
]
