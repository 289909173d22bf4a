"""
Owned resource service.

One CRUD implementation shared by every per-user resource. A resource
is described by a ResourceSchema; every operation is scoped to the
owner id taken from the verified token.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Tuple

from ..errors import MissingFieldsError, RecordNotFound
from ..storage import Document, DocumentStore, utc_now

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResourceSchema:
    """Field layout of an owned resource."""
    name: str
    collection: str
    required: Tuple[str, ...]
    optional: Tuple[str, ...] = ()

    @property
    def allowed(self) -> Tuple[str, ...]:
        return self.required + self.optional


EVENTS = ResourceSchema(
    name="event",
    collection="events",
    required=("title", "date"),
    optional=("notes",)
)

ITEMS = ResourceSchema(
    name="item",
    collection="items",
    required=("title", "date"),
    optional=("notes",)
)


def _is_blank(value: Any) -> bool:
    return value is None or value == ""


class OwnedResourceService:
    """
    CRUD over one collection, always filtered by owner.

    A record owned by someone else is reported exactly like a missing one.
    """

    def __init__(self, store: DocumentStore, schema: ResourceSchema):
        self.schema = schema
        self.collection = store.collection(schema.collection)

    def missing_fields(self, body: Mapping[str, Any]) -> List[str]:
        """Names of required fields that are absent, null or empty."""
        if not isinstance(body, Mapping):
            return list(self.schema.required)
        return [f for f in self.schema.required if _is_blank(body.get(f))]

    def serialize(self, doc: Document) -> Dict[str, Any]:
        record = {"id": doc["id"], "user": doc["user"]}
        for name in self.schema.allowed:
            record[name] = doc.get(name)
        return record

    async def create(self, owner_id: str, body: Mapping[str, Any]) -> Dict[str, Any]:
        """
        Create a record owned by owner_id.

        Raises:
            MissingFieldsError: If any required field is missing
        """
        missing = self.missing_fields(body)
        if missing:
            raise MissingFieldsError(missing)

        now = utc_now()
        doc = {name: body.get(name) for name in self.schema.allowed}
        doc.update(user=owner_id, created_at=now, updated_at=now)

        created = await self.collection.insert(doc)
        logger.info(f"Created {self.schema.name} {created['id']}")
        return self.serialize(created)

    async def list(self, owner_id: str) -> List[Dict[str, Any]]:
        """All records owned by owner_id, oldest first."""
        docs = await self.collection.find({"user": owner_id})
        logger.debug(f"Fetched {len(docs)} {self.schema.collection} for {owner_id}")
        return [self.serialize(doc) for doc in docs]

    async def get(self, owner_id: str, record_id: str) -> Dict[str, Any]:
        """
        Raises:
            RecordNotFound: If no such record belongs to owner_id
        """
        doc = await self.collection.find_one({"id": record_id, "user": owner_id})
        if doc is None:
            raise RecordNotFound(f"{self.schema.name} {record_id} not found")
        return self.serialize(doc)

    async def update(self, owner_id: str, record_id: str, body: Mapping[str, Any]) -> Dict[str, Any]:
        """
        Update the allowed fields present in body.

        Raises:
            MissingFieldsError: If any required field is missing
            RecordNotFound: If no such record belongs to owner_id
        """
        missing = self.missing_fields(body)
        if missing:
            raise MissingFieldsError(missing)

        fields = {name: body[name] for name in self.schema.allowed if name in body}
        fields["updated_at"] = utc_now()

        doc = await self.collection.update_one({"id": record_id, "user": owner_id}, fields)
        if doc is None:
            raise RecordNotFound(f"{self.schema.name} {record_id} not found")

        logger.info(f"Updated {self.schema.name} {record_id}")
        return self.serialize(doc)

    async def delete(self, owner_id: str, record_id: str):
        """
        Raises:
            RecordNotFound: If no such record belongs to owner_id
        """
        if not await self.collection.delete_one({"id": record_id, "user": owner_id}):
            raise RecordNotFound(f"{self.schema.name} {record_id} not found")
        logger.info(f"Deleted {self.schema.name} {record_id}")
