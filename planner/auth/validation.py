"""
Signup payload validation.

Rules are checked in a fixed order and the first failure wins, so a
client always gets one message pointing at one field.
"""

from typing import Any, Dict, Mapping

from ..errors import ValidationError
from .password import BCRYPT_MAX_BYTES

REQUIRED_FIELDS = ("username", "password")
STRING_FIELDS = ("username", "password", "firstName", "lastName")
EXPLICITLY_TRIMMED_FIELDS = ("username", "password")

# Character length bounds per field
SIZED_FIELDS = {
    "username": {"min": 1},
    # bcrypt truncates anything past 72 bytes
    "password": {"min": 10, "max": 72},
}


def validate_signup(body: Mapping[str, Any]) -> Dict[str, str]:
    """
    Validate a signup request body.

    Args:
        body: Parsed JSON body (any mapping; non-mappings count as empty)

    Returns:
        Cleaned fields: username, password, first_name, last_name

    Raises:
        ValidationError: On the first rule violation, with the field as location
    """
    if not isinstance(body, Mapping):
        body = {}

    missing = next((f for f in REQUIRED_FIELDS if f not in body), None)
    if missing:
        raise ValidationError("Missing field", location=missing)

    non_string = next(
        (f for f in STRING_FIELDS if f in body and not isinstance(body[f], str)),
        None
    )
    if non_string:
        raise ValidationError("Incorrect field type: expected string", location=non_string)

    non_trimmed = next(
        (f for f in EXPLICITLY_TRIMMED_FIELDS if body[f].strip() != body[f]),
        None
    )
    if non_trimmed:
        raise ValidationError("Cannot start or end with whitespace", location=non_trimmed)

    for name, bounds in SIZED_FIELDS.items():
        value = body[name]
        if "min" in bounds and len(value) < bounds["min"]:
            raise ValidationError(
                f"Must be at least {bounds['min']} characters long", location=name
            )
        if "max" in bounds and len(value) > bounds["max"]:
            raise ValidationError(
                f"Must be at most {bounds['max']} characters long", location=name
            )

    if len(body["password"].encode("utf-8")) > BCRYPT_MAX_BYTES:
        raise ValidationError(f"Must be at most {BCRYPT_MAX_BYTES} bytes long", location="password")

    return {
        "username": body["username"],
        "password": body["password"],
        "first_name": body.get("firstName", "").strip(),
        "last_name": body.get("lastName", "").strip(),
    }
