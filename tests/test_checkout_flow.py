from decimal import Decimal

import pytest

from conftest import SHIPPING
from services.checkout.client import ApiError
from services.checkout.flow import CheckoutError, CheckoutFlow, CheckoutState

CART = [
    {"id": "c1", "product": {"id": "1", "name": "Modern Office Chair", "price": "10.50"}, "quantity": 2},
    {"id": "c2", "product": {"id": "2", "name": "LED Desk Lamp", "price": 5}, "quantity": 1},
]


class Recorder:
    def __init__(self):
        self.orders = []
        self.cart_clears = 0

    async def submit_order(self, order):
        self.orders.append(order)
        return order

    async def clear_cart(self):
        self.cart_clears += 1


def make_flow(recorder, **kwargs):
    kwargs.setdefault("confirmation_delay", 0.01)
    return CheckoutFlow(recorder.submit_order, recorder.clear_cart, **kwargs)


def test_valid_shipping_moves_to_review_and_keeps_fields():
    flow = make_flow(Recorder(), cart_items=CART)
    assert flow.submit_shipping(SHIPPING) == {}
    assert flow.state is CheckoutState.REVIEWING_ORDER
    assert flow.shipping.model_dump() == {**SHIPPING, "country": "India"}


def test_invalid_shipping_stays_on_form():
    flow = make_flow(Recorder(), cart_items=CART)
    errors = flow.submit_shipping({**SHIPPING, "phone": "12345"})
    assert errors == {"phone": "Valid phone number is required"}
    assert flow.state is CheckoutState.COLLECTING_SHIPPING
    assert flow.shipping is None


def test_field_changes_report_touched_fields_only():
    flow = make_flow(Recorder())
    assert flow.change_field("phone", "98ab") == {"phone": "Valid phone number is required"}
    assert flow.change_field("full_name", "Asha") == {"phone": "Valid phone number is required"}
    assert not flow.is_valid

    for name, value in SHIPPING.items():
        flow.change_field(name, value)
    assert flow.errors == {}
    assert flow.is_valid


def test_back_from_review_keeps_address():
    backs = []
    flow = make_flow(Recorder(), on_back=lambda: backs.append(True))
    flow.submit_shipping(SHIPPING)
    flow.back()
    assert flow.state is CheckoutState.COLLECTING_SHIPPING
    assert flow.draft["city"] == SHIPPING["city"]
    assert backs == []

    flow.back()
    assert backs == [True]


def test_review_totals():
    flow = make_flow(Recorder(), cart_items=CART)
    assert flow.total == Decimal("26.00")
    assert [line.quantity for line in flow.order_items] == [2, 1]


async def test_place_order_from_cart():
    recorder = Recorder()
    completed = []
    flow = make_flow(recorder, cart_items=CART, on_complete=lambda: completed.append(True))
    flow.submit_shipping(SHIPPING)

    order = await flow.place_order()

    assert recorder.orders == [order]
    assert order["status"] == "confirmed"
    assert order["payment_method"] == "Cash on Delivery"
    assert order["transaction_id"].startswith("COD_")
    assert order["total"] == "26.00"
    assert order["shipping_address"]["country"] == "India"
    assert recorder.cart_clears == 1
    assert flow.state is CheckoutState.PLACED
    assert flow.is_processing
    assert not flow.order_confirmed

    await flow.wait_confirmed()
    assert flow.order_confirmed
    assert not flow.is_processing

    await flow.continue_shopping()
    assert completed == [True]


async def test_direct_purchase_does_not_clear_cart():
    recorder = Recorder()
    flow = make_flow(recorder, product={"id": "1", "name": "Chair", "price": "299.99"}, cart_items=CART)
    flow.submit_shipping(SHIPPING)
    order = await flow.place_order()
    assert recorder.cart_clears == 0
    assert order["total"] == "299.99"
    assert len(order["items"]) == 1


async def test_empty_cart_still_places_order():
    recorder = Recorder()
    flow = make_flow(recorder)
    flow.submit_shipping(SHIPPING)
    order = await flow.place_order()
    assert order["total"] == "0.00"
    assert flow.state is CheckoutState.PLACED


async def test_estimated_delivery_is_five_days_out():
    from datetime import datetime, timedelta

    flow = make_flow(Recorder())
    flow.submit_shipping(SHIPPING)
    order = await flow.place_order()
    created = datetime.fromisoformat(order["created_at"])
    assert datetime.fromisoformat(order["estimated_delivery"]) - created == timedelta(days=5)


async def test_place_order_only_once():
    recorder = Recorder()
    flow = make_flow(recorder)
    flow.submit_shipping(SHIPPING)
    await flow.place_order()
    with pytest.raises(CheckoutError):
        await flow.place_order()
    assert len(recorder.orders) == 1


async def test_place_order_requires_review_step():
    flow = make_flow(Recorder())
    with pytest.raises(CheckoutError):
        await flow.place_order()


async def test_failed_submission_can_be_retried():
    class Flaky(Recorder):
        async def submit_order(self, order):
            if not self.orders:
                self.orders.append(None)
                raise RuntimeError("order store down")
            return await super().submit_order(order)

    recorder = Flaky()
    flow = make_flow(recorder)
    flow.submit_shipping(SHIPPING)
    with pytest.raises(RuntimeError):
        await flow.place_order()
    assert flow.state is CheckoutState.REVIEWING_ORDER
    assert not flow.is_processing

    await flow.place_order()
    assert flow.state is CheckoutState.PLACED


async def test_checkout_against_api(storefront):
    await storefront.request("POST", "/api/cart", json={"user_id": "u1", "product_id": "1", "quantity": 2})

    flow = CheckoutFlow.for_client(storefront, user_id="u1", cart_items=CART, confirmation_delay=0.01)
    flow.submit_shipping(SHIPPING)
    order = await flow.place_order()
    await flow.wait_confirmed()

    orders = (await storefront.request("GET", "/api/orders/u1"))["orders"]
    assert [o["id"] for o in orders] == [order["id"]]
    assert orders[0]["total"] == "26.00"
    assert orders[0]["transaction_id"].startswith("COD_")
    assert (await storefront.request("GET", "/api/cart/u1"))["items"] == []


async def test_failed_cart_clear_keeps_order_placed():
    class CartDown(Recorder):
        async def clear_cart(self):
            self.cart_clears += 1
            if self.cart_clears == 1:
                raise ApiError(503, "Service Unavailable")

    recorder = CartDown()
    flow = make_flow(recorder, cart_items=CART)
    flow.submit_shipping(SHIPPING)

    order = await flow.place_order()

    assert recorder.orders == [order]
    assert flow.state is CheckoutState.PLACED
    assert not flow.cart_cleared
    with pytest.raises(CheckoutError):
        await flow.place_order()

    assert await flow.retry_clear_cart() is True
    assert flow.cart_cleared
    assert recorder.cart_clears == 2
    assert len(recorder.orders) == 1


async def test_api_checkout_clears_cart_with_the_order(storefront, monkeypatch):
    async def cart_endpoint_down(user_id):
        raise ApiError(503, "Service Unavailable")

    monkeypatch.setattr(storefront, "clear_cart", cart_endpoint_down)
    await storefront.request("POST", "/api/cart", json={"user_id": "u2", "product_id": "1", "quantity": 1})

    flow = CheckoutFlow.for_client(storefront, user_id="u2", cart_items=CART, confirmation_delay=0.01)
    flow.submit_shipping(SHIPPING)
    order = await flow.place_order()

    assert order["clear_cart"] is True
    assert flow.state is CheckoutState.PLACED
    assert flow.cart_cleared
    assert (await storefront.request("GET", "/api/cart/u2"))["items"] == []
    assert [o["id"] for o in (await storefront.request("GET", "/api/orders/u2"))["orders"]] == [order["id"]]
