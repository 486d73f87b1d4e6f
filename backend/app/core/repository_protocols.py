"""Boundary Protocols — contracts between services and the document store.

Invariants:
    - Services depend on DocumentRepository, never on the driver
    - Documents cross the boundary as plain dicts with store-native values
      (ObjectId under _id, datetimes under the timestamp keys)
    - Methods returning a document return None when nothing matched

Design Decisions:
    - Protocol over ABC: the Mongo repository and the in-memory test fake
      satisfy it structurally
"""

from typing import Any, Protocol

from bson import ObjectId


class DocumentRepository(Protocol):
    """Contract for single-collection persistence — implemented by infrastructure."""
    async def insert(self, document: dict[str, Any]) -> dict[str, Any]: ...
    async def find_by_id(self, document_id: ObjectId) -> dict[str, Any] | None: ...
    async def find_one(self, query: dict[str, Any]) -> dict[str, Any] | None: ...
    async def update(
        self, document_id: ObjectId, fields: dict[str, Any],
    ) -> dict[str, Any] | None: ...
    async def delete(self, document_id: ObjectId) -> bool: ...
    async def toggle(
        self, document_id: ObjectId, field: str,
    ) -> dict[str, Any] | None: ...
