"""Course Routes — CRUD and publish toggle for /api/v1/courses.

Invariants:
    - Every endpoint returns the standard envelope (EnvelopeRoute)
    - DELETE answers 204 with no body
"""

from fastapi import APIRouter, Depends, status

from app.api.envelope_route import EnvelopeRoute
from app.core.repository_protocols import DocumentRepository
from app.infrastructure.database import get_course_repository
from app.schemas.catalog import CourseCreate, CourseOut, CourseUpdate
from app.schemas.envelope import Envelope
from app.services.document_service import DocumentService, course_service

router = APIRouter(
    prefix="/api/v1/courses", tags=["courses"], route_class=EnvelopeRoute,
)


def get_course_service(
    repository: DocumentRepository = Depends(get_course_repository),
) -> DocumentService:
    return course_service(repository)


@router.post(
    "", response_model=Envelope[CourseOut],
    status_code=status.HTTP_201_CREATED,
)
async def create_course(
    body: CourseCreate, service: DocumentService = Depends(get_course_service),
):
    return await service.create(body)


@router.get("/{course_id}", response_model=Envelope[CourseOut])
async def get_course(
    course_id: str, service: DocumentService = Depends(get_course_service),
):
    return await service.get(course_id)


@router.patch("/{course_id}", response_model=Envelope[CourseOut])
async def update_course(
    course_id: str,
    body: CourseUpdate,
    service: DocumentService = Depends(get_course_service),
):
    return await service.update(course_id, body)


@router.delete("/{course_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_course(
    course_id: str, service: DocumentService = Depends(get_course_service),
):
    await service.delete(course_id)


@router.patch("/{course_id}/toggle-publish", response_model=Envelope[CourseOut])
async def toggle_course_publish(
    course_id: str, service: DocumentService = Depends(get_course_service),
):
    """Flip isPublished."""
    return await service.toggle(course_id)
