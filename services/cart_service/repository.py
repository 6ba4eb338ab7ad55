from typing import List, Optional

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from shared.exceptions import ConflictError
from shared.storage import MemoryStore, stamp, translate_errors, utcnow

from .models import CartItem, WishlistItem

DUPLICATE_WISHLIST_ITEM = "Product is already in the wishlist"


class SqlCartRepository:
    store_name = "database"

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_items(self, user_id: str) -> List[CartItem]:
        async with translate_errors(self.db):
            result = await self.db.execute(
                select(CartItem).where(CartItem.user_id == user_id).order_by(CartItem.created_at)
            )
            return list(result.scalars().all())

    async def add_item(self, item: CartItem) -> CartItem:
        async with translate_errors(self.db):
            self.db.add(item)
            await self.db.commit()
            await self.db.refresh(item)
            return item

    async def update_quantity(self, item_id: str, quantity: int) -> Optional[CartItem]:
        async with translate_errors(self.db):
            item = await self.db.get(CartItem, item_id)
            if not item:
                return None
            item.quantity = quantity
            item.updated_at = utcnow()
            await self.db.commit()
            await self.db.refresh(item)
            return item

    async def remove_item(self, item_id: str) -> bool:
        async with translate_errors(self.db):
            result = await self.db.execute(delete(CartItem).where(CartItem.id == item_id))
            await self.db.commit()
            return (result.rowcount or 0) > 0

    async def clear(self, user_id: str) -> bool:
        """Deletes all items for the user; True if anything was removed."""
        async with translate_errors(self.db):
            result = await self.db.execute(delete(CartItem).where(CartItem.user_id == user_id))
            await self.db.commit()
            return (result.rowcount or 0) > 0

    async def list_wishlist(self, user_id: str) -> List[WishlistItem]:
        async with translate_errors(self.db):
            result = await self.db.execute(
                select(WishlistItem).where(WishlistItem.user_id == user_id).order_by(WishlistItem.created_at)
            )
            return list(result.scalars().all())

    async def add_to_wishlist(self, item: WishlistItem) -> WishlistItem:
        async with translate_errors(self.db, DUPLICATE_WISHLIST_ITEM):
            self.db.add(item)
            await self.db.commit()
            await self.db.refresh(item)
            return item

    async def remove_from_wishlist(self, user_id: str, product_id: str) -> bool:
        async with translate_errors(self.db):
            result = await self.db.execute(
                delete(WishlistItem).where(
                    WishlistItem.user_id == user_id,
                    WishlistItem.product_id == product_id,
                )
            )
            await self.db.commit()
            return (result.rowcount or 0) > 0


class InMemoryCartRepository:
    store_name = "memory"

    def __init__(self, store: MemoryStore):
        self.store = store

    async def list_items(self, user_id: str) -> List[CartItem]:
        return [i for i in self.store.rows("cart_items") if i.user_id == user_id]

    async def add_item(self, item: CartItem) -> CartItem:
        return self.store.insert("cart_items", item)

    async def update_quantity(self, item_id: str, quantity: int) -> Optional[CartItem]:
        item = self.store.table("cart_items").get(item_id)
        if not item:
            return None
        item.quantity = quantity
        return stamp(item)

    async def remove_item(self, item_id: str) -> bool:
        return self.store.table("cart_items").pop(item_id, None) is not None

    async def clear(self, user_id: str) -> bool:
        return clear_memory_cart(self.store, user_id) > 0

    async def list_wishlist(self, user_id: str) -> List[WishlistItem]:
        return [i for i in self.store.rows("wishlist_items") if i.user_id == user_id]

    async def add_to_wishlist(self, item: WishlistItem) -> WishlistItem:
        if any(
            i.user_id == item.user_id and i.product_id == item.product_id
            for i in self.store.rows("wishlist_items")
        ):
            raise ConflictError(DUPLICATE_WISHLIST_ITEM)
        return self.store.insert("wishlist_items", item)

    async def remove_from_wishlist(self, user_id: str, product_id: str) -> bool:
        table = self.store.table("wishlist_items")
        for item_id, item in list(table.items()):
            if item.user_id == user_id and item.product_id == product_id:
                del table[item_id]
                return True
        return False


def clear_memory_cart(store: MemoryStore, user_id: str) -> int:
    """Removes a user's cart rows from the memory store and returns how many went."""
    table = store.table("cart_items")
    doomed = [item_id for item_id, item in table.items() if item.user_id == user_id]
    for item_id in doomed:
        del table[item_id]
    return len(doomed)
