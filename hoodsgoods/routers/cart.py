from fastapi import APIRouter, Depends, status

from hoodsgoods.deps import get_cart_service, require
from hoodsgoods.models import User
from hoodsgoods.schemas.auth import MessageResponse
from hoodsgoods.schemas.cart import CartItemCreate, CartItemOut, CartItemUpdate, CartOut, CartSync
from hoodsgoods.services.cart import CartService

router = APIRouter(prefix="/cart", tags=["cart"])


@router.get("", response_model=CartOut)
async def get_cart(user: User = Depends(require("cart")), service: CartService = Depends(get_cart_service)) -> CartOut:
    return await service.get_cart(user.id)


@router.post("", response_model=CartItemOut, status_code=status.HTTP_201_CREATED)
async def add_to_cart(
    payload: CartItemCreate,
    user: User = Depends(require("cart")),
    service: CartService = Depends(get_cart_service),
):
    return await service.add_to_cart(user.id, payload)


@router.post("/sync", response_model=CartOut)
async def sync_cart(
    payload: CartSync,
    user: User = Depends(require("cart")),
    service: CartService = Depends(get_cart_service),
) -> CartOut:
    return await service.sync_cart(user.id, payload.items)


@router.patch("/{product_id}", response_model=CartItemOut)
async def update_quantity(
    product_id: int,
    payload: CartItemUpdate,
    user: User = Depends(require("cart")),
    service: CartService = Depends(get_cart_service),
):
    return await service.update_quantity(user.id, product_id, payload.quantity)


@router.delete("/{product_id}", response_model=MessageResponse)
async def remove_from_cart(
    product_id: int,
    user: User = Depends(require("cart")),
    service: CartService = Depends(get_cart_service),
) -> MessageResponse:
    await service.remove_from_cart(user.id, product_id)
    return MessageResponse(message="Item removed from cart")


@router.delete("", response_model=MessageResponse)
async def clear_cart(user: User = Depends(require("cart")), service: CartService = Depends(get_cart_service)) -> MessageResponse:
    removed = await service.clear_cart(user.id)
    return MessageResponse(message=f"Cart cleared ({removed} items removed)")
