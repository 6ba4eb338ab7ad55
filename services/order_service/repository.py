from typing import List

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from services.cart_service.models import CartItem
from services.cart_service.repository import clear_memory_cart
from shared.exceptions import ConflictError
from shared.storage import MemoryStore, stamp, translate_errors

from .models import Order

DUPLICATE_ORDER = "Order already exists"


class SqlOrderRepository:
    store_name = "database"

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_orders(self, user_id: str) -> List[Order]:
        async with translate_errors(self.db):
            result = await self.db.execute(
                select(Order).where(Order.user_id == user_id).order_by(Order.created_at)
            )
            return list(result.scalars().all())

    async def place_order(self, order: Order, clear_cart_for: str = None) -> Order:
        """
        Writes the order, its items and (optionally) the cart clear in a
        single transaction: either all of it commits or none of it does.
        """
        async with translate_errors(self.db, DUPLICATE_ORDER):
            self.db.add(order)  # items cascade with the order
            if clear_cart_for:
                await self.db.execute(delete(CartItem).where(CartItem.user_id == clear_cart_for))
            await self.db.commit()
            await self.db.refresh(order)
            return order


class InMemoryOrderRepository:
    store_name = "memory"

    def __init__(self, store: MemoryStore):
        self.store = store

    async def list_orders(self, user_id: str) -> List[Order]:
        return [o for o in self.store.rows("orders") if o.user_id == user_id]

    async def place_order(self, order: Order, clear_cart_for: str = None) -> Order:
        # No await between the checks and the writes, so no other request interleaves
        if order.id and order.id in self.store.table("orders"):
            raise ConflictError(DUPLICATE_ORDER)
        self.store.insert("orders", order)
        for item in order.items:
            stamp(item)
            item.order_id = order.id
        if clear_cart_for:
            clear_memory_cart(self.store, clear_cart_for)
        return order
