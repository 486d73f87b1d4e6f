"""Document Services — create/read/update/delete/toggle for users, courses and products.

Invariants:
    - Path ids are parsed once; malformed ids raise InvalidIdentifierError (400)
    - Missing documents raise ResourceNotFoundError (404) with "<Resource> not found"
    - createdAt/updatedAt are stamped here, updatedAt refreshed on every write
    - Empty updates raise ValidationFailedError (400)
    - Return values are raw documents; normalization happens in the route layer

Design Decisions:
    - One DocumentService parameterized by resource name and toggle field,
      since the three collections share the same lifecycle
    - UserService adds the email uniqueness check (409)
"""

import logging
from datetime import datetime, timezone
from typing import Any

from bson import ObjectId
from pydantic import BaseModel

from app.core.errors import (
    ConflictError, InvalidIdentifierError, ResourceNotFoundError,
    ValidationFailedError,
)
from app.core.repository_protocols import DocumentRepository

logger = logging.getLogger(__name__)


def parse_object_id(value: str) -> ObjectId:
    """Parse a 24-char hex path id."""
    if not isinstance(value, str) or not ObjectId.is_valid(value):
        raise InvalidIdentifierError(value)
    return ObjectId(value)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class DocumentService:
    """Lifecycle operations on a single collection."""

    def __init__(
        self,
        repository: DocumentRepository,
        resource: str,
        toggle_field: str,
    ):
        self.repository = repository
        self.resource = resource
        self.toggle_field = toggle_field

    async def _get_or_404(self, document_id: ObjectId) -> dict[str, Any]:
        document = await self.repository.find_by_id(document_id)
        if document is None:
            raise ResourceNotFoundError(self.resource)
        return document

    async def create(self, body: BaseModel) -> dict[str, Any]:
        now = _utcnow()
        document = body.model_dump(by_alias=True)
        document["createdAt"] = now
        document["updatedAt"] = now
        created = await self.repository.insert(document)
        logger.info(
            f"{self.resource} created",
            extra={"document_id": str(created["_id"])},
        )
        return created

    async def get(self, raw_id: str) -> dict[str, Any]:
        return await self._get_or_404(parse_object_id(raw_id))

    async def update(self, raw_id: str, body: BaseModel) -> dict[str, Any]:
        document_id = parse_object_id(raw_id)
        fields = body.model_dump(by_alias=True, exclude_unset=True, exclude_none=True)
        if not fields:
            raise ValidationFailedError(["body must contain at least one field"])
        await self._get_or_404(document_id)
        fields["updatedAt"] = _utcnow()
        updated = await self.repository.update(document_id, fields)
        if updated is None:
            raise ResourceNotFoundError(self.resource)
        return updated

    async def delete(self, raw_id: str) -> None:
        document_id = parse_object_id(raw_id)
        if not await self.repository.delete(document_id):
            raise ResourceNotFoundError(self.resource)
        logger.info(
            f"{self.resource} deleted", extra={"document_id": str(document_id)},
        )

    async def toggle(self, raw_id: str) -> dict[str, Any]:
        """Flip the resource's boolean flag (isActive / isPublished)."""
        document = await self.repository.toggle(
            parse_object_id(raw_id), self.toggle_field,
        )
        if document is None:
            raise ResourceNotFoundError(self.resource)
        return document


class UserService(DocumentService):
    """Users — email must be unique across the collection."""

    def __init__(self, repository: DocumentRepository):
        super().__init__(repository, "User", "isActive")

    async def _check_email_free(
        self, email: str, exclude_id: ObjectId | None = None,
    ) -> None:
        existing = await self.repository.find_one({"email": email})
        if existing is not None and existing.get("_id") != exclude_id:
            raise ConflictError("User with this email already exists")

    async def create(self, body: BaseModel) -> dict[str, Any]:
        await self._check_email_free(body.email)
        return await super().create(body)

    async def update(self, raw_id: str, body: BaseModel) -> dict[str, Any]:
        email = getattr(body, "email", None)
        if email is not None:
            await self._check_email_free(email, parse_object_id(raw_id))
        return await super().update(raw_id, body)


def course_service(repository: DocumentRepository) -> DocumentService:
    return DocumentService(repository, "Course", "isPublished")


def product_service(repository: DocumentRepository) -> DocumentService:
    return DocumentService(repository, "Product", "isPublished")
