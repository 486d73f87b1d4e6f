"""Catalog Schemas — request bodies for /api/v1/courses and /api/v1/products.

Invariants:
    - Courses are keyed by title, products by name; both 1-100 chars
    - price is a number; tags default to an empty list
    - Update models: every field optional (emptiness checked by the service)

Design Decisions:
    - Shared _CatalogFields base: the two resources differ only in their
      display field
"""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _CatalogFields(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    description: str | None = None
    price: float
    tags: list[str] = Field(default_factory=list)
    is_published: bool = True


class _CatalogUpdate(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    description: str | None = None
    price: float | None = None
    tags: list[str] | None = None
    is_published: bool | None = None


class _CatalogOut(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str = Field(alias="_id")
    description: str | None = None
    price: float
    tags: list[str] = Field(default_factory=list)
    is_published: bool
    created_at: str
    updated_at: str


# ─── Courses ────────────────────────────────────────────────────

class CourseCreate(_CatalogFields):
    title: str = Field(min_length=1, max_length=100)


class CourseUpdate(_CatalogUpdate):
    title: str | None = Field(None, min_length=1, max_length=100)


class CourseOut(_CatalogOut):
    title: str


# ─── Products ───────────────────────────────────────────────────

class ProductCreate(_CatalogFields):
    name: str = Field(min_length=1, max_length=100)


class ProductUpdate(_CatalogUpdate):
    name: str | None = Field(None, min_length=1, max_length=100)


class ProductOut(_CatalogOut):
    name: str
