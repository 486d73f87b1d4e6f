"""Product Routes — CRUD and publish toggle for /api/v1/products."""

from fastapi import APIRouter, Depends, status

from app.api.envelope_route import EnvelopeRoute
from app.core.repository_protocols import DocumentRepository
from app.infrastructure.database import get_product_repository
from app.schemas.catalog import ProductCreate, ProductOut, ProductUpdate
from app.schemas.envelope import Envelope
from app.services.document_service import DocumentService, product_service

router = APIRouter(
    prefix="/api/v1/products", tags=["products"], route_class=EnvelopeRoute,
)


def get_product_service(
    repository: DocumentRepository = Depends(get_product_repository),
) -> DocumentService:
    return product_service(repository)


@router.post(
    "", response_model=Envelope[ProductOut],
    status_code=status.HTTP_201_CREATED,
)
async def create_product(
    body: ProductCreate, service: DocumentService = Depends(get_product_service),
):
    return await service.create(body)


@router.get("/{product_id}", response_model=Envelope[ProductOut])
async def get_product(
    product_id: str, service: DocumentService = Depends(get_product_service),
):
    return await service.get(product_id)


@router.patch("/{product_id}", response_model=Envelope[ProductOut])
async def update_product(
    product_id: str,
    body: ProductUpdate,
    service: DocumentService = Depends(get_product_service),
):
    return await service.update(product_id, body)


@router.delete("/{product_id}", status_code=status.HTTP_200_OK)
async def delete_product(
    product_id: str, service: DocumentService = Depends(get_product_service),
):
    await service.delete(product_id)


@router.patch(
    "/{product_id}/toggle-publish", response_model=Envelope[ProductOut],
)
async def toggle_product_publish(
    product_id: str, service: DocumentService = Depends(get_product_service),
):
    return await service.toggle(product_id)
