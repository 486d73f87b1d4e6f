"""Health & Readiness Probes — liveness and readiness endpoints for container orchestration.

Invariants:
    - GET /health/ always returns 200 if process is up (liveness, enveloped)
    - GET /health/ready returns 503 if the document store is unreachable (readiness, raw body)
"""

import logging
from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from app.api.envelope_route import EnvelopeRoute, skip_envelope
import app.infrastructure.database as database

logger = logging.getLogger(__name__)
router = APIRouter(
    prefix="/api/v1/health", tags=["health"], route_class=EnvelopeRoute,
)


@router.get("/", status_code=status.HTTP_200_OK)
async def health_check():
    """Basic liveness probe. Returns 200 if the process is up."""
    return {
        "status": "healthy",
        "service": "catalog-api",
        "version": "1.0.0",
    }


@router.get("/ready")
@skip_envelope
async def readiness_check():
    """Readiness probe — includes document store connectivity."""
    store = database.document_store
    db_ok = await store.health_check() if store else False
    if not db_ok:
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={
                "status": "not_ready",
                "reason": "database_unavailable",
            },
        )
    return {"status": "ready", "checks": {"database": "healthy"}}
