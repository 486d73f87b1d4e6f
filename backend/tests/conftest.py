"""Root conftest — shared test configuration and the in-memory repository fake.

Invariants:
    - Tests never reach a real document store (env points at a closed port)
    - InMemoryRepository satisfies the DocumentRepository protocol
"""

import os
from datetime import datetime, timezone

import pytest
from bson import ObjectId

os.environ.setdefault("MONGODB_URL", "mongodb://localhost:1")
os.environ.setdefault("MONGODB_DATABASE", "catalog_test")
os.environ.setdefault("MONGODB_TIMEOUT_MS", "50")


class InMemoryRepository:
    """DocumentRepository fake holding documents in a dict keyed by ObjectId."""

    def __init__(self):
        self.documents: dict[ObjectId, dict] = {}

    async def insert(self, document: dict) -> dict:
        doc = dict(document)
        doc.setdefault("_id", ObjectId())
        self.documents[doc["_id"]] = doc
        return dict(doc)

    async def find_by_id(self, document_id: ObjectId) -> dict | None:
        doc = self.documents.get(document_id)
        return dict(doc) if doc is not None else None

    async def find_one(self, query: dict) -> dict | None:
        for doc in self.documents.values():
            if all(doc.get(k) == v for k, v in query.items()):
                return dict(doc)
        return None

    async def update(self, document_id: ObjectId, fields: dict) -> dict | None:
        doc = self.documents.get(document_id)
        if doc is None:
            return None
        doc.update(fields)
        return dict(doc)

    async def delete(self, document_id: ObjectId) -> bool:
        return self.documents.pop(document_id, None) is not None

    async def toggle(self, document_id: ObjectId, field: str) -> dict | None:
        doc = self.documents.get(document_id)
        if doc is None:
            return None
        doc[field] = not doc.get(field)
        doc["updatedAt"] = datetime.now(timezone.utc)
        return dict(doc)


@pytest.fixture
def repositories():
    """Fresh, empty repositories for users, courses and products."""
    return {
        "users": InMemoryRepository(),
        "courses": InMemoryRepository(),
        "products": InMemoryRepository(),
    }
