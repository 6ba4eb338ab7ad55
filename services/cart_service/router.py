from typing import Optional

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from shared.config.database import get_db

from .repository import InMemoryCartRepository, SqlCartRepository
from .schemas import (
    CartItemCreate,
    CartItemEnvelope,
    CartItemListEnvelope,
    CartItemUpdate,
    SuccessResponse,
    WishlistItemCreate,
    WishlistItemEnvelope,
    WishlistItemListEnvelope,
)
from .service import CartService, WishlistService

router = APIRouter(prefix="/cart", tags=["Cart"])
wishlist_router = APIRouter(prefix="/wishlist", tags=["Wishlist"])


def get_cart_service(request: Request, db: Optional[AsyncSession] = Depends(get_db)) -> CartService:
    repo, fallback = request.app.state.stores.repositories(db, SqlCartRepository, InMemoryCartRepository)
    return CartService(repo, fallback)


def get_wishlist_service(request: Request, db: Optional[AsyncSession] = Depends(get_db)) -> WishlistService:
    repo, fallback = request.app.state.stores.repositories(db, SqlCartRepository, InMemoryCartRepository)
    return WishlistService(repo, fallback)


# Registered before /{user_id} so "user" is never read as a cart owner
@router.delete("/user/{user_id}", response_model=SuccessResponse)
async def clear_cart(user_id: str, service: CartService = Depends(get_cart_service)):
    return {"success": await service.clear_cart(user_id)}


@router.get("/{user_id}", response_model=CartItemListEnvelope)
async def get_cart(user_id: str, service: CartService = Depends(get_cart_service)):
    return {"items": await service.get_cart(user_id)}


@router.post("", response_model=CartItemEnvelope, status_code=status.HTTP_201_CREATED)
async def add_to_cart(payload: CartItemCreate, service: CartService = Depends(get_cart_service)):
    return {"item": await service.add_item(payload)}


@router.put("/{item_id}", response_model=CartItemEnvelope)
async def update_cart_item(
    item_id: str,
    payload: CartItemUpdate,
    service: CartService = Depends(get_cart_service),
):
    return {"item": await service.update_quantity(item_id, payload.quantity)}


@router.delete("/{item_id}", response_model=SuccessResponse)
async def remove_from_cart(item_id: str, service: CartService = Depends(get_cart_service)):
    await service.remove_item(item_id)
    return {"success": True}


@wishlist_router.get("/{user_id}", response_model=WishlistItemListEnvelope)
async def get_wishlist(user_id: str, service: WishlistService = Depends(get_wishlist_service)):
    return {"items": await service.get_wishlist(user_id)}


@wishlist_router.post("", response_model=WishlistItemEnvelope, status_code=status.HTTP_201_CREATED)
async def add_to_wishlist(payload: WishlistItemCreate, service: WishlistService = Depends(get_wishlist_service)):
    return {"item": await service.add_item(payload)}


@wishlist_router.delete("/{user_id}/{product_id}", response_model=SuccessResponse)
async def remove_from_wishlist(
    user_id: str,
    product_id: str,
    service: WishlistService = Depends(get_wishlist_service),
):
    await service.remove_item(user_id, product_id)
    return {"success": True}
