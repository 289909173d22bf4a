"""
API router.

Aggregates all endpoints.
"""

from fastapi import APIRouter

from . import auth, users
from .resources import events_router, items_router

router = APIRouter()

# Include all route modules
router.include_router(auth.router, prefix="/auth", tags=["Authentication"])
router.include_router(users.router, prefix="/users", tags=["Users"])
router.include_router(events_router, prefix="/events", tags=["Events"])
router.include_router(items_router, prefix="/items", tags=["Items"])
