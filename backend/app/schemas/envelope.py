"""Envelope Schemas — Pydantic description of the wire shape for OpenAPI.

Invariants:
    - Mirrors core/envelope.py builders key-for-key (six top-level keys)
    - Used for documentation only: builders return plain dicts

Design Decisions:
    - Generic over the data type so routes can advertise Envelope[ProductOut]
"""

from typing import Generic, TypeVar

from pydantic import BaseModel

T = TypeVar("T")


class ServerError(BaseModel):
    """One error entry — field and code are omitted when unknown."""
    field: str | None = None
    message: str
    code: str | None = None


class Envelope(BaseModel, Generic[T]):
    """Standard response body for every endpoint."""
    status: str
    code: int
    message: str
    data: T | None = None
    timestamp: str
    errors: list[ServerError] | None = None
