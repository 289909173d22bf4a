"""
Services layer for the Planner API.

Business logic as reusable services consumed by the HTTP API and the
admin scripts.
"""

from .resource_service import EVENTS, ITEMS, OwnedResourceService, ResourceSchema
from .user_auth_service import AuthResult, UserAuthService

__all__ = [
    # Services
    "UserAuthService",
    "OwnedResourceService",
    # Data classes
    "AuthResult",
    "ResourceSchema",
    # Schemas
    "EVENTS",
    "ITEMS",
]
