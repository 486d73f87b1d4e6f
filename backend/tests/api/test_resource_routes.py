"""Resource Routes — users, courses and products through the full app.

Invariants:
    - Create answers 201 with a 24-hex _id and ISO timestamps
    - Unknown ids answer 404 "<Resource> not found"; malformed ids answer 400
    - Body validation failures answer 400 "Validation failed" with per-field entries
    - Course delete answers 204 with no body; product/user delete answer 200
    - Toggle endpoints flip isActive / isPublished
"""

from bson import ObjectId

MISSING_ID = "65a1f0c2e4b0a1b2c3d4e5f6"


def _course(**overrides) -> dict:
    body = {"title": "Intro to Python", "price": 49.0, "tags": ["python"]}
    body.update(overrides)
    return body


def _product(**overrides) -> dict:
    body = {"name": "Desk Lamp", "price": 19.5}
    body.update(overrides)
    return body


def _user(**overrides) -> dict:
    body = {"firstName": "Ada", "lastName": "Lovelace", "email": "ada@example.com"}
    body.update(overrides)
    return body


# --- products ----------------------------------------------------------------

async def test_create_product_returns_201_envelope(client, repositories):
    res = await client.post("/api/v1/products", json=_product())
    assert res.status_code == 201
    body = res.json()
    assert body["status"] == "created"
    assert body["message"] == "Resource created successfully"
    assert body["errors"] is None
    data = body["data"]
    assert ObjectId.is_valid(data["_id"]) and len(data["_id"]) == 24
    assert data["name"] == "Desk Lamp"
    assert data["isPublished"] is True
    assert data["tags"] == []
    assert data["createdAt"].endswith("Z")
    assert ObjectId(data["_id"]) in repositories["products"].documents


async def test_get_missing_product_returns_404(client):
    res = await client.get(f"/api/v1/products/{MISSING_ID}")
    assert res.status_code == 404
    body = res.json()
    assert body["status"] == "not_found"
    assert body["code"] == 404
    assert body["data"] is None
    assert body["errors"] == [{"message": "Product not found"}]


async def test_get_product_with_malformed_id_returns_400(client):
    res = await client.get("/api/v1/products/not-an-id")
    assert res.status_code == 400
    body = res.json()
    assert body["status"] == "bad_request"
    assert len(body["errors"]) == 1


async def test_get_product_round_trip(client):
    created = (await client.post("/api/v1/products", json=_product())).json()
    res = await client.get(f"/api/v1/products/{created['data']['_id']}")
    assert res.status_code == 200
    body = res.json()
    assert body["message"] == "Resource retrieved successfully"
    assert body["data"]["_id"] == created["data"]["_id"]


async def test_create_product_validation_failure(client):
    res = await client.post("/api/v1/products", json={"name": "", "price": "cheap"})
    assert res.status_code == 400
    body = res.json()
    assert body["message"] == "Validation failed"
    assert body["data"] is None
    fields = {e["field"] for e in body["errors"]}
    assert fields == {"name", "price"}
    assert all(e["message"] for e in body["errors"])


async def test_update_product_changes_fields(client):
    created = (await client.post("/api/v1/products", json=_product())).json()
    product_id = created["data"]["_id"]
    res = await client.patch(f"/api/v1/products/{product_id}", json={"price": 25})
    assert res.status_code == 200
    body = res.json()
    assert body["message"] == "Resource updated successfully"
    assert body["data"]["price"] == 25
    assert body["data"]["name"] == "Desk Lamp"


async def test_update_product_with_empty_body_fails_validation(client):
    created = (await client.post("/api/v1/products", json=_product())).json()
    res = await client.patch(
        f"/api/v1/products/{created['data']['_id']}", json={},
    )
    assert res.status_code == 400
    body = res.json()
    assert body["message"] == "Validation failed"
    assert body["errors"] == [
        {"field": "body", "message": "must contain at least one field"},
    ]


async def test_update_missing_product_returns_404(client):
    res = await client.patch(f"/api/v1/products/{MISSING_ID}", json={"price": 1})
    assert res.status_code == 404


async def test_delete_product_returns_200_with_null_data(client, repositories):
    created = (await client.post("/api/v1/products", json=_product())).json()
    res = await client.delete(f"/api/v1/products/{created['data']['_id']}")
    assert res.status_code == 200
    body = res.json()
    assert body["data"] is None
    assert body["message"] == "Resource deleted successfully"
    assert repositories["products"].documents == {}


async def test_toggle_product_publish(client):
    created = (await client.post("/api/v1/products", json=_product())).json()
    product_id = created["data"]["_id"]
    res = await client.patch(f"/api/v1/products/{product_id}/toggle-publish")
    assert res.json()["data"]["isPublished"] is False
    res = await client.patch(f"/api/v1/products/{product_id}/toggle-publish")
    assert res.json()["data"]["isPublished"] is True


# --- courses -----------------------------------------------------------------

async def test_create_course(client):
    res = await client.post("/api/v1/courses", json=_course())
    assert res.status_code == 201
    assert res.json()["data"]["title"] == "Intro to Python"


async def test_delete_course_returns_204_without_body(client, repositories):
    created = (await client.post("/api/v1/courses", json=_course())).json()
    res = await client.delete(f"/api/v1/courses/{created['data']['_id']}")
    assert res.status_code == 204
    assert res.content == b""
    assert repositories["courses"].documents == {}


async def test_delete_missing_course_returns_404(client):
    res = await client.delete(f"/api/v1/courses/{MISSING_ID}")
    assert res.status_code == 404
    assert res.json()["errors"] == [{"message": "Course not found"}]


# --- users -------------------------------------------------------------------

async def test_create_user(client):
    res = await client.post("/api/v1/users", json=_user())
    assert res.status_code == 201
    data = res.json()["data"]
    assert data["firstName"] == "Ada"
    assert data["isActive"] is True


async def test_create_user_with_taken_email_returns_409(client):
    await client.post("/api/v1/users", json=_user())
    res = await client.post("/api/v1/users", json=_user(firstName="Other"))
    assert res.status_code == 409
    body = res.json()
    assert body["status"] == "conflict"
    assert body["message"] == "User with this email already exists"
    assert body["errors"] == [{"message": "User with this email already exists"}]


async def test_create_user_with_invalid_email_fails_validation(client):
    res = await client.post("/api/v1/users", json=_user(email="nope"))
    assert res.status_code == 400
    assert [e["field"] for e in res.json()["errors"]] == ["email"]


async def test_toggle_user_status(client):
    created = (await client.post("/api/v1/users", json=_user())).json()
    res = await client.patch(f"/api/v1/users/{created['data']['_id']}/status")
    assert res.status_code == 200
    assert res.json()["data"]["isActive"] is False


# --- framework errors --------------------------------------------------------

async def test_unknown_route_returns_404_envelope(client):
    res = await client.get("/api/v1/nothing-here")
    assert res.status_code == 404
    body = res.json()
    assert body["status"] == "not_found"
    assert body["errors"] == [{"message": "Not Found"}]


async def test_wrong_method_returns_405_envelope(client):
    res = await client.put(f"/api/v1/products/{MISSING_ID}", json={})
    assert res.status_code == 405
    body = res.json()
    assert body["status"] == "error"
    assert body["message"] == "Method Not Allowed"


async def test_liveness_check_is_enveloped(client):
    res = await client.get("/api/v1/health/")
    assert res.status_code == 200
    assert res.json()["data"]["status"] == "healthy"
