"""
Two-step checkout: collect a shipping address, review, then place a
Cash on Delivery order.

    flow = CheckoutFlow.for_client(client, user_id="u1", cart_items=cart)
    flow.submit_shipping(form)      # -> {} and REVIEWING_ORDER
    await flow.place_order()        # -> PLACED, confirmation scheduled
    await flow.wait_confirmed()
    await flow.continue_shopping()

Placement can only start from the review step and only once; a second
call while the first is in flight or after it finished raises
CheckoutError. The confirmation delay cannot be cancelled.

Once ``submit_order`` succeeds the order exists, so the flow is PLACED
even if clearing the cart afterwards fails; ``retry_clear_cart()``
repeats only that step.
"""
import asyncio
import inspect
import time
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, Iterable, List, Optional

import structlog

from services.order_service.assembly import OrderLine, order_lines, order_total
from services.order_service.schemas import ShippingAddress

from .client import StorefrontClient
from .shipping import SHIPPING_FIELDS, validate_shipping

logger = structlog.get_logger(__name__)

COD_PAYMENT_METHOD = "Cash on Delivery"
DELIVERY_DAYS = 5


class CheckoutState(str, Enum):
    COLLECTING_SHIPPING = "collecting_shipping"
    REVIEWING_ORDER = "reviewing_order"
    PLACED = "placed"


class CheckoutError(Exception):
    """An action was attempted from a state that does not allow it."""


def _now_ms() -> int:
    return int(time.time() * 1000)


async def _maybe_await(result: Any) -> Any:
    if inspect.isawaitable(result):
        return await result
    return result


class CheckoutFlow:
    def __init__(
        self,
        submit_order: Callable[[Dict[str, Any]], Awaitable[Any]],
        clear_cart: Optional[Callable[[], Awaitable[Any]]] = None,
        product: Any = None,
        cart_items: Iterable[Any] = (),
        user_id: Optional[str] = None,
        confirmation_delay: float = 2.0,
        on_back: Optional[Callable[[], Any]] = None,
        on_complete: Optional[Callable[[], Any]] = None,
        clear_cart_with_order: bool = False,
    ):
        self.submit_order = submit_order
        self.clear_cart = clear_cart
        self.product = product
        self.user_id = user_id
        self.confirmation_delay = confirmation_delay
        self.on_back = on_back
        self.on_complete = on_complete
        self.clear_cart_with_order = clear_cart_with_order

        self.state = CheckoutState.COLLECTING_SHIPPING
        self.draft: Dict[str, str] = {}
        self.errors: Dict[str, str] = {}
        self.shipping: Optional[ShippingAddress] = None
        self.order: Optional[Dict[str, Any]] = None
        self.order_id = f"ORD-{_now_ms()}"
        self.is_processing = False
        self.order_confirmed = False
        self.cart_cleared = False

        self._lines = order_lines(product, list(cart_items))
        self._touched: set = set()
        self._confirmed = asyncio.Event()

    @classmethod
    def for_client(
        cls,
        client: StorefrontClient,
        user_id: Optional[str] = None,
        **kwargs,
    ) -> "CheckoutFlow":
        """
        Wires placement to the storefront API. The server clears the cart in
        the same transaction that stores the order.
        """
        return cls(submit_order=client.create_order, user_id=user_id, clear_cart_with_order=True, **kwargs)

    # --- Review data ---

    @property
    def order_items(self) -> List[OrderLine]:
        return list(self._lines)

    @property
    def total(self) -> Decimal:
        return order_total(self._lines)

    @property
    def _from_cart(self) -> bool:
        return self.product is None

    # --- Step 1: shipping ---

    @property
    def is_valid(self) -> bool:
        _, errors = validate_shipping(self.draft)
        return not errors

    def change_field(self, name: str, value: Any) -> Dict[str, str]:
        """Updates one form field and returns the errors for the fields touched so far."""
        self._require(CheckoutState.COLLECTING_SHIPPING)
        self.draft[name] = "" if value is None else str(value)
        self._touched.add(name)
        _, errors = validate_shipping(self.draft)
        self.errors = {field: msg for field, msg in errors.items() if field in self._touched}
        return dict(self.errors)

    def submit_shipping(self, data: Optional[Dict[str, Any]] = None) -> Dict[str, str]:
        self._require(CheckoutState.COLLECTING_SHIPPING)
        if data:
            self.draft.update({k: "" if v is None else str(v) for k, v in data.items()})
        self._touched.update(SHIPPING_FIELDS)

        address, errors = validate_shipping(self.draft)
        self.errors = errors
        if errors:
            return dict(errors)

        self.shipping = address
        self.state = CheckoutState.REVIEWING_ORDER
        return {}

    def back(self) -> None:
        if self.state is CheckoutState.REVIEWING_ORDER:
            # The address stays in the draft for editing
            self.state = CheckoutState.COLLECTING_SHIPPING
        elif self.state is CheckoutState.COLLECTING_SHIPPING:
            if self.on_back:
                self.on_back()
        else:
            raise CheckoutError("Order already placed")

    # --- Step 2: placement ---

    def build_order(self) -> Dict[str, Any]:
        created = datetime.now(timezone.utc)
        return {
            "id": self.order_id,
            "user_id": self.user_id,
            "items": [line.to_payload() for line in self._lines],
            "total": str(self.total),
            "status": "confirmed",
            "shipping_address": self.shipping.model_dump(),
            "payment_method": COD_PAYMENT_METHOD,
            "transaction_id": f"COD_{_now_ms()}",
            "created_at": created.isoformat(),
            "estimated_delivery": (created + timedelta(days=DELIVERY_DAYS)).isoformat(),
            "clear_cart": self.clear_cart_with_order and self._from_cart and self.user_id is not None,
        }

    async def place_order(self) -> Dict[str, Any]:
        self._require(CheckoutState.REVIEWING_ORDER)
        if self.is_processing:
            raise CheckoutError("Order placement already in progress")

        self.is_processing = True
        order = self.build_order()
        try:
            await self.submit_order(order)
        except BaseException:
            self.is_processing = False
            raise

        self.order = order
        self.state = CheckoutState.PLACED
        self.cart_cleared = order["clear_cart"]
        logger.info("checkout_order_placed", order_id=order["id"], total=order["total"], items=len(order["items"]))

        asyncio.get_running_loop().call_later(self.confirmation_delay, self._confirm)
        if not self.cart_cleared:
            await self.retry_clear_cart()
        return order

    async def retry_clear_cart(self) -> bool:
        """Clears the cart behind a placed order. Returns False (and logs) when that fails."""
        if self.state is not CheckoutState.PLACED:
            raise CheckoutError("No order has been placed")
        if self.cart_cleared or not self._from_cart or self.clear_cart is None:
            return self.cart_cleared
        try:
            await self.clear_cart()
        except Exception as exc:
            logger.warning("checkout_cart_clear_failed", order_id=self.order_id, error=str(exc))
            return False
        self.cart_cleared = True
        return True

    def _confirm(self) -> None:
        self.order_confirmed = True
        self.is_processing = False
        self._confirmed.set()

    async def wait_confirmed(self) -> None:
        if self.state is not CheckoutState.PLACED:
            raise CheckoutError("No order has been placed")
        await self._confirmed.wait()

    async def continue_shopping(self) -> None:
        if not self.order_confirmed:
            raise CheckoutError("Order is not confirmed yet")
        if self.on_complete:
            await _maybe_await(self.on_complete())

    def _require(self, state: CheckoutState) -> None:
        if self.state is not state:
            raise CheckoutError(f"Not allowed while {self.state.value}")
