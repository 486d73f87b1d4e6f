"""API test fixtures — httpx client over the ASGI app.

Invariants:
    - Repository dependencies overridden with the in-memory fakes; no
      document store is ever contacted
    - App exceptions are not re-raised: the client sees what a real client sees
"""

import pytest
from httpx import ASGITransport, AsyncClient

from app.infrastructure.database import (
    get_course_repository, get_product_repository, get_user_repository,
)
from app.main import app


@pytest.fixture
async def client(repositories):
    """Test client with repository dependencies overridden."""
    app.dependency_overrides[get_user_repository] = lambda: repositories["users"]
    app.dependency_overrides[get_course_repository] = lambda: repositories["courses"]
    app.dependency_overrides[get_product_repository] = lambda: repositories["products"]

    async with AsyncClient(
        transport=ASGITransport(app=app, raise_app_exceptions=False),
        base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
