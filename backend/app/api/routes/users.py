"""User Routes — CRUD and status toggle for /api/v1/users.

Invariants:
    - Every endpoint returns the standard envelope (EnvelopeRoute)
    - POST answers 201; a duplicate email answers 409
    - PATCH /{user_id}/status flips isActive
"""

from fastapi import APIRouter, Depends, status

from app.api.envelope_route import EnvelopeRoute
from app.core.repository_protocols import DocumentRepository
from app.infrastructure.database import get_user_repository
from app.schemas.envelope import Envelope
from app.schemas.user import UserCreate, UserOut, UserUpdate
from app.services.document_service import UserService

router = APIRouter(
    prefix="/api/v1/users", tags=["users"], route_class=EnvelopeRoute,
)


def get_user_service(
    repository: DocumentRepository = Depends(get_user_repository),
) -> UserService:
    return UserService(repository)


@router.post(
    "", response_model=Envelope[UserOut],
    status_code=status.HTTP_201_CREATED,
)
async def create_user(
    body: UserCreate, service: UserService = Depends(get_user_service),
):
    """Create a user. Email must not be taken."""
    return await service.create(body)


@router.get("/{user_id}", response_model=Envelope[UserOut])
async def get_user(
    user_id: str, service: UserService = Depends(get_user_service),
):
    return await service.get(user_id)


@router.patch("/{user_id}", response_model=Envelope[UserOut])
async def update_user(
    user_id: str,
    body: UserUpdate,
    service: UserService = Depends(get_user_service),
):
    """Partial update; only fields present in the body are written."""
    return await service.update(user_id, body)


@router.delete("/{user_id}", status_code=status.HTTP_200_OK)
async def delete_user(
    user_id: str, service: UserService = Depends(get_user_service),
):
    await service.delete(user_id)


@router.patch("/{user_id}/status", response_model=Envelope[UserOut])
async def toggle_user_status(
    user_id: str, service: UserService = Depends(get_user_service),
):
    """Flip isActive."""
    return await service.toggle(user_id)
