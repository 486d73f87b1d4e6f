"""Document Store — driver error mapping and repository calls against a stub collection.

Invariants:
    - DuplicateKeyError → ConflictError; other PyMongoError → DatabaseError (503)
    - insert returns a copy carrying the generated _id
    - Dependencies refuse to hand out repositories before init_store()
"""

import pytest
from bson import ObjectId
from pymongo.errors import (
    AutoReconnect, DuplicateKeyError, OperationFailure, PyMongoError,
)

import app.infrastructure.database as database
from app.core.errors import ConflictError, DatabaseError
from app.infrastructure.database import MongoDocumentRepository


class _InsertResult:
    def __init__(self, inserted_id):
        self.inserted_id = inserted_id


class _DeleteResult:
    def __init__(self, deleted_count):
        self.deleted_count = deleted_count


class StubCollection:
    """Records calls; raises `error` from every method when set."""

    def __init__(self, error: Exception | None = None):
        self.error = error
        self.calls: list[tuple] = []

    def _check(self):
        if self.error:
            raise self.error

    async def insert_one(self, doc):
        self.calls.append(("insert_one", doc))
        self._check()
        return _InsertResult(ObjectId())

    async def find_one(self, query):
        self.calls.append(("find_one", query))
        self._check()
        return None

    async def find_one_and_update(self, query, update, return_document=None):
        self.calls.append(("find_one_and_update", query, update))
        self._check()
        return {"_id": query["_id"]}

    async def delete_one(self, query):
        self.calls.append(("delete_one", query))
        self._check()
        return _DeleteResult(1)


async def test_insert_returns_document_with_generated_id():
    repo = MongoDocumentRepository(StubCollection())
    source = {"name": "Lamp"}
    doc = await repo.insert(source)
    assert isinstance(doc["_id"], ObjectId)
    assert "_id" not in source


async def test_update_uses_set_operator():
    collection = StubCollection()
    repo = MongoDocumentRepository(collection)
    oid = ObjectId()
    await repo.update(oid, {"price": 3})
    assert collection.calls[-1] == (
        "find_one_and_update", {"_id": oid}, {"$set": {"price": 3}},
    )


async def test_toggle_uses_pipeline_negation():
    collection = StubCollection()
    repo = MongoDocumentRepository(collection)
    await repo.toggle(ObjectId(), "isPublished")
    pipeline = collection.calls[-1][2]
    assert pipeline[0]["$set"]["isPublished"] == {"$not": ["$isPublished"]}


async def test_delete_reports_deleted_count():
    repo = MongoDocumentRepository(StubCollection())
    assert await repo.delete(ObjectId()) is True


async def test_duplicate_key_maps_to_conflict():
    repo = MongoDocumentRepository(StubCollection(DuplicateKeyError("dup")))
    with pytest.raises(ConflictError):
        await repo.insert({"email": "a@b.c"})


@pytest.mark.parametrize("error", [
    AutoReconnect("down"), OperationFailure("denied"), PyMongoError("boom"),
])
async def test_driver_errors_map_to_database_error(error):
    repo = MongoDocumentRepository(StubCollection(error))
    with pytest.raises(DatabaseError) as info:
        await repo.find_by_id(ObjectId())
    assert info.value.http_status == 503
    assert "boom" not in info.value.message


def test_repository_dependency_requires_initialized_store(monkeypatch):
    monkeypatch.setattr(database, "document_store", None)
    with pytest.raises(RuntimeError):
        database.get_product_repository()
