"""
Owned resource endpoints.

One router factory serves every per-user resource (events, items).
All routes require a valid bearer token and only ever touch records
owned by its principal.
"""

import logging
from typing import Any, Callable, Dict, List, Optional

from fastapi import APIRouter, Body, Response, status

from planner.services import OwnedResourceService

from ..deps import CurrentPrincipal, ServicesDep, Services

logger = logging.getLogger(__name__)

Record = Dict[str, Any]


def build_resource_router(select: Callable[[Services], OwnedResourceService]) -> APIRouter:
    """
    Build CRUD routes for one resource.

    Args:
        select: Picks the resource's service out of the Services container
    """
    router = APIRouter()

    @router.post("", response_model=Record, status_code=status.HTTP_201_CREATED)
    async def create_record(
        principal: CurrentPrincipal,
        services: ServicesDep,
        body: Optional[Dict[str, Any]] = Body(None)
    ):
        """Create a record owned by the caller."""
        return await select(services).create(principal.id, body or {})

    @router.get("", response_model=List[Record])
    async def list_records(principal: CurrentPrincipal, services: ServicesDep):
        """List the caller's records, oldest first."""
        return await select(services).list(principal.id)

    @router.get("/{record_id}", response_model=Record)
    async def get_record(record_id: str, principal: CurrentPrincipal, services: ServicesDep):
        """Fetch one of the caller's records."""
        return await select(services).get(principal.id, record_id)

    @router.put("/{record_id}", response_model=Record)
    async def update_record(
        record_id: str,
        principal: CurrentPrincipal,
        services: ServicesDep,
        body: Optional[Dict[str, Any]] = Body(None)
    ):
        """Update the given fields of one of the caller's records."""
        return await select(services).update(principal.id, record_id, body or {})

    @router.delete("/{record_id}", status_code=status.HTTP_204_NO_CONTENT)
    async def delete_record(record_id: str, principal: CurrentPrincipal, services: ServicesDep):
        """Delete one of the caller's records."""
        await select(services).delete(principal.id, record_id)
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    return router


events_router = build_resource_router(lambda services: services.events)
items_router = build_resource_router(lambda services: services.items)
