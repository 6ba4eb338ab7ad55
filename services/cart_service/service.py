from typing import List

import structlog

from shared.exceptions import NotFoundError
from shared.storage import StoreBackedService

from .models import CartItem, WishlistItem
from .schemas import CartItemCreate, WishlistItemCreate

logger = structlog.get_logger(__name__)


class CartService(StoreBackedService):
    resource = "cart_items"

    async def get_cart(self, user_id: str) -> List[CartItem]:
        return await self._call(lambda repo: repo.list_items(user_id))

    async def add_item(self, data: CartItemCreate) -> CartItem:
        values = data.model_dump()
        item = await self._call(lambda repo: repo.add_item(CartItem(**values)))
        logger.info("cart_item_added", user_id=item.user_id, product_id=item.product_id, quantity=item.quantity)
        return item

    async def update_quantity(self, item_id: str, quantity: int) -> CartItem:
        item = await self._call(lambda repo: repo.update_quantity(item_id, quantity))
        if not item:
            raise NotFoundError("Cart item not found")
        return item

    async def remove_item(self, item_id: str) -> None:
        removed = await self._call(lambda repo: repo.remove_item(item_id))
        if not removed:
            raise NotFoundError("Cart item not found")

    async def clear_cart(self, user_id: str) -> bool:
        cleared = await self._call(lambda repo: repo.clear(user_id))
        logger.info("cart_cleared", user_id=user_id, removed_any=cleared)
        return cleared


class WishlistService(StoreBackedService):
    resource = "wishlist_items"

    async def get_wishlist(self, user_id: str) -> List[WishlistItem]:
        return await self._call(lambda repo: repo.list_wishlist(user_id))

    async def add_item(self, data: WishlistItemCreate) -> WishlistItem:
        values = data.model_dump()
        return await self._call(lambda repo: repo.add_to_wishlist(WishlistItem(**values)))

    async def remove_item(self, user_id: str, product_id: str) -> None:
        removed = await self._call(lambda repo: repo.remove_from_wishlist(user_id, product_id))
        if not removed:
            raise NotFoundError("Wishlist item not found")
