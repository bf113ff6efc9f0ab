from decimal import Decimal

from fastapi import APIRouter, Depends, Query, status
from pydantic import ValidationError

from hoodsgoods.deps import get_catalog_service, get_moderation_service, require
from hoodsgoods.errors import ValidationFailed
from hoodsgoods.models import User
from hoodsgoods.schemas.auth import MessageResponse
from hoodsgoods.schemas.products import ProductCreate, ProductFilter, ProductOut, ProductPage, ProductUpdate
from hoodsgoods.services.catalog import CatalogService
from hoodsgoods.services.moderation import ModerationService

router = APIRouter(prefix="/products", tags=["products"])


@router.get("", response_model=ProductPage)
async def list_products(
    category: str | None = None,
    min_price: Decimal | None = Query(None, alias="minPrice"),
    max_price: Decimal | None = Query(None, alias="maxPrice"),
    sort_by: str = Query("id", alias="sortBy"),
    sort_order: str = Query("asc", alias="sortOrder"),
    page: int = 1,
    limit: int | None = None,
    store_name: str | None = Query(None, alias="storeName"),
    user_id: str | None = Query(None, alias="userID"),
    service: CatalogService = Depends(get_catalog_service),
) -> ProductPage:
    try:
        criteria = ProductFilter(
            category=category,
            min_price=min_price,
            max_price=max_price,
            sort_by=sort_by,
            sort_order=sort_order.lower(),
            page=page,
            limit=limit,
            store_name=store_name,
            user_id=user_id,
        )
    except ValidationError as e:
        raise ValidationFailed("; ".join(err["msg"] for err in e.errors()))
    return await service.filter_products(criteria)


@router.get("/featured", response_model=list[ProductOut])
async def featured_products(
    limit: int = Query(5, ge=1),
    service: CatalogService = Depends(get_catalog_service),
):
    return await service.featured(limit)


@router.get("/pending", response_model=list[ProductOut])
async def pending_products(
    _: User = Depends(require("moderate")),
    service: ModerationService = Depends(get_moderation_service),
):
    return await service.pending_products()


@router.get("/inactive", response_model=list[ProductOut])
async def inactive_products(
    _: User = Depends(require("moderate")),
    service: ModerationService = Depends(get_moderation_service),
):
    return await service.inactive_products_of_active_stores()


@router.post("", response_model=ProductOut, status_code=status.HTTP_201_CREATED)
async def create_product(
    payload: ProductCreate,
    user: User = Depends(require("product.manage")),
    service: CatalogService = Depends(get_catalog_service),
):
    return await service.create_product(user.id, payload)


@router.get("/{product_id}", response_model=ProductOut)
async def get_product(product_id: int, service: CatalogService = Depends(get_catalog_service)):
    return await service.get_product(product_id)


@router.patch("/{product_id}", response_model=ProductOut)
async def update_product(
    product_id: int,
    payload: ProductUpdate,
    user: User = Depends(require("product.manage")),
    service: CatalogService = Depends(get_catalog_service),
):
    return await service.update_product(product_id, user.id, payload)


@router.delete("/{product_id}", response_model=MessageResponse)
async def delete_product(
    product_id: int,
    user: User = Depends(require("product.manage")),
    service: CatalogService = Depends(get_catalog_service),
) -> MessageResponse:
    await service.delete_product(product_id, user.id)
    return MessageResponse(message=f"Product {product_id} deleted")


@router.patch("/{product_id}/approve", response_model=ProductOut)
async def approve_product(
    product_id: int,
    admin: User = Depends(require("moderate")),
    service: ModerationService = Depends(get_moderation_service),
):
    return await service.approve_product(admin.id, product_id)


@router.delete("/{product_id}/disapprove", response_model=MessageResponse)
async def disapprove_product(
    product_id: int,
    reason: str | None = None,
    admin: User = Depends(require("moderate")),
    service: ModerationService = Depends(get_moderation_service),
) -> MessageResponse:
    await service.reject_product(admin.id, product_id, reason)
    return MessageResponse(message=f"Product {product_id} rejected and deleted")
