"""
Razorpay payment adapters.

Both variants load the provider script, ask the storefront API for a
provider order, open the hosted widget and send the widget's response
back to the API for verification. Failures reach ``on_error`` as a single
message string; a verified payment reaches ``on_success`` as a
PaymentResult.

The widget itself is a browser component, so it is reached through the
PaymentWidget protocol. SimulatedWidget stands in for it in development
and tests.
"""
import inspect
import secrets
import time
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Any, Callable, Dict, Optional, Protocol

import httpx
import structlog

from .client import ApiError, StorefrontClient

logger = structlog.get_logger(__name__)

RAZORPAY_SCRIPT_URL = "https://checkout.razorpay.com/v1/checkout.js"
THEME_COLOR = "#F59E0B"
RESPONSE_FIELDS = ("razorpay_order_id", "razorpay_payment_id", "razorpay_signature")


def _now_ms() -> int:
    return int(time.time() * 1000)


class PaymentStatus(str, Enum):
    IDLE = "idle"
    PROCESSING = "processing"
    SUCCESS = "success"
    FAILED = "failed"


@dataclass
class CustomerInfo:
    name: str
    email: str
    contact: str


DEFAULT_CUSTOMER = CustomerInfo(name="Customer", email="customer@example.com", contact="9999999999")


@dataclass
class PaymentResult:
    success: bool
    payment_id: str
    order_id: str
    amount: Decimal
    method: str = "Razorpay"
    timestamp: int = field(default_factory=_now_ms)
    payment_details: Optional[Dict[str, Any]] = None


class ScriptLoader(Protocol):
    async def load(self, url: str) -> bool:
        """True once the script at ``url`` is available."""


class PaymentWidget(Protocol):
    async def open(self, options: Dict[str, Any]) -> Optional[Dict[str, str]]:
        """
        Shows the hosted payment UI. Returns the provider's response fields
        (razorpay_order_id, razorpay_payment_id, razorpay_signature), or None
        when the customer dismisses the widget.
        """


class HttpScriptLoader:
    """Fetches the provider script once and remembers that it is available."""

    def __init__(self, timeout: float = 10.0):
        self.timeout = timeout
        self.loaded: set = set()

    async def load(self, url: str) -> bool:
        if url in self.loaded:
            return True
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as http:
                resp = await http.get(url)
        except httpx.HTTPError as exc:
            logger.warning("payment_script_failed", url=url, error=str(exc))
            return False
        if resp.is_error:
            logger.warning("payment_script_failed", url=url, status=resp.status_code)
            return False
        self.loaded.add(url)
        return True


class SimulatedWidget:
    """Completes (or dismisses) every payment without showing anything."""

    def __init__(self, dismiss: bool = False):
        self.dismiss = dismiss
        self.opened: list = []

    async def open(self, options: Dict[str, Any]) -> Optional[Dict[str, str]]:
        self.opened.append(options)
        if self.dismiss:
            return None
        return {
            "razorpay_order_id": options["order_id"],
            "razorpay_payment_id": f"pay_{secrets.token_hex(7)}",
            "razorpay_signature": secrets.token_hex(32),
        }


class PaymentError(Exception):
    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


async def _notify(callback: Callable[[Any], Any], value: Any) -> None:
    result = callback(value)
    if inspect.isawaitable(result):
        await result


def _widget_options(
    created: Dict[str, Any],
    order_id: str,
    customer: CustomerInfo,
    store_name: str,
) -> Dict[str, Any]:
    try:
        provider_order = created["order"]
        options = {
            "key": created["key_id"],
            "amount": provider_order["amount"],
            "currency": provider_order["currency"],
            "order_id": provider_order["id"],
        }
    except (KeyError, TypeError) as exc:
        raise PaymentError("Invalid payment order response") from exc
    options.update(
        name=store_name,
        description=f"Payment for Order #{order_id}",
        prefill={"name": customer.name, "email": customer.email, "contact": customer.contact},
        theme={"color": THEME_COLOR},
    )
    return options


async def _open_widget(widget: PaymentWidget, options: Dict[str, Any]) -> Optional[Dict[str, str]]:
    try:
        response = await widget.open(options)
    except Exception as exc:
        raise PaymentError(f"Payment failed: {exc}") from exc
    if response is None:
        return None
    if not isinstance(response, dict) or not all(response.get(key) for key in RESPONSE_FIELDS):
        raise PaymentError("Incomplete payment response")
    return response


async def _verify(client: StorefrontClient, response: Dict[str, str]) -> Dict[str, Any]:
    verification = await client.verify_razorpay_payment(
        response["razorpay_order_id"],
        response["razorpay_payment_id"],
        response["razorpay_signature"],
    )
    if not (verification.get("success") and verification.get("verified")):
        raise PaymentError("Payment verification failed")
    return verification


class PaymentPanel:
    """
    Full payment panel. The gateway script is loaded once by ``prepare()``;
    ``pay()`` refuses to start until it is. A failed payment can be retried,
    a successful one cannot be repeated.
    """

    def __init__(
        self,
        client: StorefrontClient,
        amount: Decimal,
        order_id: str,
        customer: CustomerInfo,
        on_success: Callable[[PaymentResult], Any],
        on_error: Callable[[str], Any],
        script_loader: Optional[ScriptLoader] = None,
        widget: Optional[PaymentWidget] = None,
    ):
        self.client = client
        self.amount = Decimal(str(amount))
        self.order_id = order_id
        self.customer = customer
        self.on_success = on_success
        self.on_error = on_error
        self.script_loader = script_loader or HttpScriptLoader()
        self.widget = widget or SimulatedWidget()

        self.status = PaymentStatus.IDLE
        self.is_loading = False
        self.gateway_loaded = False

    async def prepare(self) -> bool:
        if not self.gateway_loaded:
            self.gateway_loaded = await self.script_loader.load(RAZORPAY_SCRIPT_URL)
        return self.gateway_loaded

    @property
    def can_pay(self) -> bool:
        return self.gateway_loaded and not self.is_loading and self.status is not PaymentStatus.SUCCESS

    @property
    def status_message(self) -> str:
        return {
            PaymentStatus.PROCESSING: "Processing payment...",
            PaymentStatus.SUCCESS: "Payment successful!",
            PaymentStatus.FAILED: "Payment failed. Please try again.",
        }.get(self.status, "Ready to process payment")

    async def pay(self) -> None:
        if not self.gateway_loaded:
            await _notify(self.on_error, "Payment gateway not loaded. Please try again.")
            return
        if self.is_loading or self.status is PaymentStatus.SUCCESS:
            return

        self.is_loading = True
        self.status = PaymentStatus.PROCESSING
        try:
            created = await self.client.create_razorpay_order(
                self.amount,
                currency="INR",
                receipt=self.order_id,
                notes={
                    "customer_name": self.customer.name,
                    "customer_email": self.customer.email,
                    "order_id": self.order_id,
                },
            )
            if not created.get("success"):
                raise PaymentError("Failed to create payment order")

            options = _widget_options(created, self.order_id, self.customer, "Premium E-Commerce")
            response = await _open_widget(self.widget, options)
            if response is None:
                self.status = PaymentStatus.FAILED
                await _notify(self.on_error, "Payment cancelled by user")
                return

            verification = await _verify(self.client, response)
        except (ApiError, PaymentError) as exc:
            self.status = PaymentStatus.FAILED
            logger.warning("payment_failed", order_id=self.order_id, error=exc.message)
            await _notify(self.on_error, exc.message)
            return
        finally:
            self.is_loading = False

        self.status = PaymentStatus.SUCCESS
        logger.info("payment_succeeded", order_id=self.order_id, payment_id=response["razorpay_payment_id"])
        await _notify(
            self.on_success,
            PaymentResult(
                success=True,
                payment_id=response["razorpay_payment_id"],
                order_id=response["razorpay_order_id"],
                amount=self.amount,
                payment_details=verification.get("verification"),
            ),
        )


class PaymentButton:
    """
    Standalone pay button. The script is (re)checked on every click and a
    dismissed widget puts the button back to IDLE.
    """

    def __init__(
        self,
        client: StorefrontClient,
        amount: Decimal,
        on_success: Callable[[PaymentResult], Any],
        on_error: Callable[[str], Any],
        order_id: Optional[str] = None,
        customer: Optional[CustomerInfo] = None,
        disabled: bool = False,
        script_loader: Optional[ScriptLoader] = None,
        widget: Optional[PaymentWidget] = None,
    ):
        self.client = client
        self.amount = Decimal(str(amount))
        self.order_id = order_id or f"ORDER_{_now_ms()}"
        self.customer = customer or DEFAULT_CUSTOMER
        self.on_success = on_success
        self.on_error = on_error
        self.disabled = disabled
        self.script_loader = script_loader or HttpScriptLoader()
        self.widget = widget or SimulatedWidget()

        self.status = PaymentStatus.IDLE
        self.is_processing = False

    @property
    def label(self) -> str:
        if self.is_processing:
            return "Processing..."
        if self.status is PaymentStatus.SUCCESS:
            return "Payment Successful"
        if self.status is PaymentStatus.FAILED:
            return "Try Again"
        return f"Pay ₹{self.amount:,}"

    async def click(self) -> None:
        if self.disabled or self.is_processing:
            return

        self.is_processing = True
        self.status = PaymentStatus.PROCESSING
        try:
            if not await self.script_loader.load(RAZORPAY_SCRIPT_URL):
                raise PaymentError("Failed to load Razorpay script")

            created = await self.client.create_razorpay_order(
                self.amount,
                currency="INR",
                receipt=self.order_id,
                notes={"customer_name": self.customer.name, "customer_email": self.customer.email},
            )
            if not created.get("success"):
                raise PaymentError("Failed to create order")

            options = _widget_options(created, self.order_id, self.customer, "Premium E-Commerce Store")
            response = await _open_widget(self.widget, options)
            if response is None:
                self.status = PaymentStatus.IDLE
                await _notify(self.on_error, "Payment cancelled by user")
                return

            await _verify(self.client, response)
        except (ApiError, PaymentError) as exc:
            self.status = PaymentStatus.FAILED
            logger.warning("payment_failed", order_id=self.order_id, error=exc.message)
            await _notify(self.on_error, exc.message)
            return
        finally:
            self.is_processing = False

        self.status = PaymentStatus.SUCCESS
        await _notify(
            self.on_success,
            PaymentResult(
                success=True,
                payment_id=response["razorpay_payment_id"],
                order_id=response["razorpay_order_id"],
                amount=self.amount,
            ),
        )
