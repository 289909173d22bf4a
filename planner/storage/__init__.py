"""
Storage layer for the Planner API.

A small JSON document store; one file per collection.
"""

from .documents import Collection, Document, DocumentStore, new_id, utc_now

__all__ = [
    "Collection",
    "Document",
    "DocumentStore",
    "new_id",
    "utc_now",
]
