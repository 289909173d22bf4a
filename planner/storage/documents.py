"""
File-backed document store.

Each collection is a single JSON object on disk mapping document id to
document, so insertion order is preserved. Reads and writes run in a
worker thread; every write is load-modify-replace under a per-collection
lock and lands via an atomic rename.
"""

import asyncio
import json
import logging
import os
import tempfile
import threading
import uuid
from copy import deepcopy
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from ..errors import DuplicateKeyError, StoreError

logger = logging.getLogger(__name__)

Document = Dict[str, Any]


def new_id() -> str:
    """Generate an opaque document id."""
    return uuid.uuid4().hex


def utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _matches(doc: Document, query: Optional[Document]) -> bool:
    if not query:
        return True
    return all(doc.get(key) == value for key, value in query.items())


class Collection:
    """A named set of documents persisted to one JSON file."""

    def __init__(self, name: str, file_path: Path):
        self.name = name
        self.file_path = file_path
        self._lock = threading.Lock()

    # Synchronous primitives, always called from a worker thread

    def _load_all(self) -> Dict[str, Document]:
        if not self.file_path.exists():
            return {}
        try:
            with open(self.file_path, "r", encoding="utf-8") as f:
                return json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise StoreError(f"Could not read collection '{self.name}': {e}") from e

    def _save_all(self, docs: Dict[str, Document]):
        try:
            fd, tmp_path = tempfile.mkstemp(
                dir=self.file_path.parent, prefix=f".{self.name}.", suffix=".tmp"
            )
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(docs, f, indent=2, ensure_ascii=False)
            os.replace(tmp_path, self.file_path)
        except OSError as e:
            raise StoreError(f"Could not write collection '{self.name}': {e}") from e

    def _insert(self, doc: Document, unique: Tuple[str, ...]) -> Document:
        with self._lock:
            docs = self._load_all()
            record = deepcopy(doc)
            record.setdefault("id", new_id())
            if record["id"] in docs:
                raise DuplicateKeyError("id")
            for key in unique:
                if any(d.get(key) == record.get(key) for d in docs.values()):
                    raise DuplicateKeyError(key)
            docs[record["id"]] = record
            self._save_all(docs)
        return deepcopy(record)

    def _find(self, query: Optional[Document]) -> List[Document]:
        with self._lock:
            docs = self._load_all()
        return [deepcopy(d) for d in docs.values() if _matches(d, query)]

    def _update_one(self, query: Document, fields: Document) -> Optional[Document]:
        with self._lock:
            docs = self._load_all()
            for doc_id, doc in docs.items():
                if _matches(doc, query):
                    doc.update(deepcopy(fields))
                    doc["id"] = doc_id
                    self._save_all(docs)
                    return deepcopy(doc)
        return None

    def _delete(self, query: Document, limit: Optional[int]) -> int:
        with self._lock:
            docs = self._load_all()
            doomed = [doc_id for doc_id, doc in docs.items() if _matches(doc, query)]
            if limit is not None:
                doomed = doomed[:limit]
            for doc_id in doomed:
                del docs[doc_id]
            if doomed:
                self._save_all(docs)
        return len(doomed)

    # Async API

    async def insert(self, doc: Document, unique: Tuple[str, ...] = ()) -> Document:
        """
        Insert a document, assigning an id if it has none.

        Args:
            doc: Document to store
            unique: Keys whose value must not already exist in the collection

        Raises:
            DuplicateKeyError: If the id or a unique key is already taken
        """
        return await asyncio.to_thread(self._insert, doc, tuple(unique))

    async def find(self, query: Optional[Document] = None) -> List[Document]:
        """Return all documents matching every key in query, in insertion order."""
        return await asyncio.to_thread(self._find, query)

    async def find_one(self, query: Document) -> Optional[Document]:
        docs = await self.find(query)
        return docs[0] if docs else None

    async def update_one(self, query: Document, fields: Document) -> Optional[Document]:
        """Merge fields into the first matching document and return it."""
        return await asyncio.to_thread(self._update_one, query, fields)

    async def delete_one(self, query: Document) -> bool:
        return await asyncio.to_thread(self._delete, query, 1) == 1

    async def delete_many(self, query: Optional[Document] = None) -> int:
        return await asyncio.to_thread(self._delete, query or {}, None)


class DocumentStore:
    """
    Directory of JSON collections.

    Usage:
        store = DocumentStore(Path("data"))
        events = store.collection("events")
        doc = await events.insert({"title": "Launch"})
    """

    def __init__(self, data_dir: Path):
        self.data_dir = Path(data_dir)
        self._collections: Dict[str, Collection] = {}
        self._guard = threading.Lock()
        self._ensure_dir()

    def _ensure_dir(self):
        """Ensure the data directory exists."""
        self.data_dir.mkdir(parents=True, exist_ok=True)

    def collection(self, name: str) -> Collection:
        with self._guard:
            if name not in self._collections:
                self._collections[name] = Collection(name, self.data_dir / f"{name}.json")
                logger.debug(f"Opened collection '{name}' at {self.data_dir}")
            return self._collections[name]
