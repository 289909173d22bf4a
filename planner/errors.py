"""
Error taxonomy for the Planner API.

Every error raised on purpose by the core derives from PlannerError.
The HTTP layer maps each class to a status code; anything else is
treated as an internal failure.
"""

from typing import List, Optional


class PlannerError(Exception):
    """Base class for all expected application errors."""


class ValidationError(PlannerError):
    """Client input failed a field rule."""

    reason = "ValidationError"

    def __init__(self, message: str, location: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.location = location

    def to_dict(self) -> dict:
        return {
            "code": 422,
            "reason": self.reason,
            "message": self.message,
            "location": self.location,
        }


class MissingFieldsError(PlannerError):
    """Required resource fields were absent from a request body."""

    def __init__(self, fields: List[str]):
        self.fields = list(fields)
        self.message = (
            "Bad Request: Missing the following fields from the request body: "
            + ", ".join(self.fields)
        )
        super().__init__(self.message)


class RecordNotFound(PlannerError):
    """No record with that id is owned by the caller."""


class AuthError(PlannerError):
    """Base class for authentication failures."""


class InvalidCredentials(AuthError):
    """Unknown username or wrong password. Deliberately indistinguishable."""

    def __init__(self, message: str = "Incorrect username or password"):
        super().__init__(message)


class TokenError(AuthError):
    """Base class for bearer token failures."""


class TokenInvalid(TokenError):
    """Bad signature, malformed payload or unexpected algorithm."""


class TokenExpired(TokenError):
    """Token is past its expiry time."""


class StoreError(PlannerError):
    """The document store could not complete an operation."""


class DuplicateKeyError(StoreError):
    """An insert would break a unique key."""

    def __init__(self, key: str):
        super().__init__(f"Duplicate value for unique key '{key}'")
        self.key = key
