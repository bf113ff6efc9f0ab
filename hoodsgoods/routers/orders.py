from fastapi import APIRouter, Depends

from hoodsgoods.deps import get_order_service, require
from hoodsgoods.models import SellerOrderStatus, User
from hoodsgoods.schemas.orders import CreateOrderRequest, EarningsOut, OrderOut, SellerOrderOut, UpdateSellerOrderStatus
from hoodsgoods.services.orders import OrderService

router = APIRouter(prefix="/orders", tags=["orders"])


@router.post("", response_model=OrderOut, status_code=201)
async def create_order(
    payload: CreateOrderRequest,
    user: User = Depends(require("order.create")),
    service: OrderService = Depends(get_order_service),
):
    return await service.create_order(user.id, payload)


@router.get("/mine", response_model=list[OrderOut])
async def my_orders(user: User = Depends(require("order.create")), service: OrderService = Depends(get_order_service)):
    return await service.find_buyer_orders(user.id)


@router.get("/seller", response_model=list[SellerOrderOut])
async def seller_orders(user: User = Depends(require("order.fulfil")), service: OrderService = Depends(get_order_service)):
    return await service.find_seller_orders(user.id)


@router.get("/seller/earnings", response_model=EarningsOut)
async def seller_earnings(
    status: SellerOrderStatus | None = None,
    user: User = Depends(require("order.fulfil")),
    service: OrderService = Depends(get_order_service),
) -> EarningsOut:
    return EarningsOut(total_earnings=await service.seller_earnings(user.id, status))


@router.patch("/seller/{seller_order_id}/status", response_model=SellerOrderOut)
async def update_status(
    seller_order_id: int,
    payload: UpdateSellerOrderStatus,
    user: User = Depends(require("order.fulfil")),
    service: OrderService = Depends(get_order_service),
):
    return await service.update_seller_order_status(user.id, seller_order_id, payload.status)
