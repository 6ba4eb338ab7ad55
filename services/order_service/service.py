import time
from typing import List

import structlog

from shared.observability.metrics import (
    storefront_checkout_duration_seconds,
    storefront_orders_placed_total,
)
from shared.storage import StoreBackedService

from .assembly import OrderLine, order_total
from .models import Order, OrderItem
from .schemas import OrderCreate

logger = structlog.get_logger(__name__)


class OrderService(StoreBackedService):
    resource = "orders"

    async def get_orders(self, user_id: str) -> List[Order]:
        return await self._call(lambda repo: repo.list_orders(user_id))

    async def place_order(self, data: OrderCreate) -> Order:
        start_time = time.time()
        lines = [
            OrderLine(item.product_id, item.product_name, item.price, item.quantity)
            for item in data.items
        ]
        # Total comes from the submitted prices; nothing is re-priced against the catalogue
        total = order_total(lines)
        clear_cart_for = data.user_id if data.clear_cart else None

        def build() -> Order:
            # A fresh instance per attempt so a failed SQL write leaves nothing behind for the fallback
            values = data.model_dump(exclude={"items", "clear_cart"}, exclude_none=True)
            return Order(
                **values,
                total=total,
                items=[
                    OrderItem(
                        product_id=line.product_id,
                        product_name=line.product_name,
                        unit_price=line.unit_price,
                        quantity=line.quantity,
                    )
                    for line in lines
                ],
            )

        order, from_fallback = await self._run(lambda repo: repo.place_order(build(), clear_cart_for))

        store = "memory" if from_fallback else self.repo.store_name
        storefront_orders_placed_total.labels(store=store).inc()
        storefront_checkout_duration_seconds.observe(time.time() - start_time)
        logger.info(
            "order_placed",
            order_id=order.id,
            user_id=order.user_id,
            total=str(total),
            items=len(lines),
            store=store,
            cart_cleared=bool(clear_cart_for),
        )
        return order
