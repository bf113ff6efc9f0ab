from fastapi import APIRouter, Depends, status

from hoodsgoods.deps import get_moderation_service, get_store_service, require
from hoodsgoods.models import User
from hoodsgoods.schemas.auth import MessageResponse
from hoodsgoods.schemas.stores import (
    DeliveryDetails,
    DeliveryOptionsRequest,
    StoreCreate,
    StoreOut,
    StoreUpdate,
    StoreWithProducts,
)
from hoodsgoods.services.moderation import ModerationService
from hoodsgoods.services.stores import StoreService

router = APIRouter(prefix="/stores", tags=["stores"])


@router.get("", response_model=list[StoreOut])
async def list_active_stores(service: StoreService = Depends(get_store_service)):
    return await service.list_active_stores()


@router.post("", response_model=StoreWithProducts, status_code=status.HTTP_201_CREATED)
async def create_store(
    payload: StoreCreate,
    user: User = Depends(require("store.create")),
    service: StoreService = Depends(get_store_service),
) -> StoreWithProducts:
    return await service.create_store(user, payload)


@router.post("/delivery-options", response_model=dict[int, DeliveryDetails])
async def delivery_options(payload: DeliveryOptionsRequest, service: StoreService = Depends(get_store_service)):
    return await service.get_delivery_options(payload.store_ids)


@router.get("/my-store", response_model=StoreWithProducts)
async def my_store(
    user: User = Depends(require("store.manage")),
    service: StoreService = Depends(get_store_service),
) -> StoreWithProducts:
    return await service.get_my_store(user.id)


@router.patch("/my-store", response_model=StoreOut)
async def update_my_store(
    payload: StoreUpdate,
    user: User = Depends(require("store.manage")),
    service: StoreService = Depends(get_store_service),
):
    return await service.update_store(user.id, payload)


@router.get("/all", response_model=list[StoreWithProducts])
async def all_stores(
    _: User = Depends(require("moderate")),
    service: StoreService = Depends(get_store_service),
) -> list[StoreWithProducts]:
    return await service.list_stores()


@router.get("/inactive", response_model=list[StoreWithProducts])
async def inactive_stores(
    _: User = Depends(require("moderate")),
    service: StoreService = Depends(get_store_service),
) -> list[StoreWithProducts]:
    return await service.list_inactive_stores()


@router.patch("/{store_id}/approve", response_model=StoreOut)
async def approve_store(
    store_id: int,
    admin: User = Depends(require("moderate")),
    service: ModerationService = Depends(get_moderation_service),
):
    return await service.approve_store(admin.id, store_id)


@router.delete("/{store_id}", response_model=MessageResponse)
async def reject_store(
    store_id: int,
    reason: str | None = None,
    admin: User = Depends(require("moderate")),
    service: ModerationService = Depends(get_moderation_service),
) -> MessageResponse:
    await service.reject_store(admin.id, store_id, reason)
    return MessageResponse(message=f"Store {store_id} and its products deleted")
