import os
from decimal import Decimal
from typing import Any, Dict, Optional

import httpx
import structlog

logger = structlog.get_logger(__name__)

STOREFRONT_URL = os.getenv("STOREFRONT_URL", "http://localhost:5000")


class ApiError(Exception):
    """Non-2xx answer (or no answer) from the storefront API."""

    def __init__(self, status_code: int, message: str):
        super().__init__(message)
        self.status_code = status_code
        self.message = message


class StorefrontClient:
    """
    JSON client for the storefront API used by the checkout flow and the
    payment adapters. Pass ``http`` to reuse an existing AsyncClient (the
    caller then owns it).
    """

    def __init__(self, base_url: str = STOREFRONT_URL, http: Optional[httpx.AsyncClient] = None, timeout: float = 10.0):
        self._owns_http = http is None
        self.http = http or httpx.AsyncClient(base_url=base_url, timeout=timeout)

    async def __aenter__(self) -> "StorefrontClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_http:
            await self.http.aclose()

    async def request(self, method: str, path: str, json: Optional[dict] = None) -> Dict[str, Any]:
        try:
            resp = await self.http.request(method, path, json=json)
        except httpx.HTTPError as exc:
            logger.warning("storefront_unreachable", method=method, path=path, error=str(exc))
            raise ApiError(0, f"Network error: {exc}") from exc

        try:
            body = resp.json() if resp.content else {}
        except ValueError:
            body = {}

        if resp.is_error:
            message = None
            if isinstance(body, dict):
                message = body.get("error") or body.get("message")
            raise ApiError(resp.status_code, message or f"Request failed with status {resp.status_code}")
        return body

    # --- Orders and cart ---

    async def create_order(self, order: Dict[str, Any]) -> Dict[str, Any]:
        body = await self.request("POST", "/api/orders", json=order)
        return body["order"]

    async def clear_cart(self, user_id: str) -> bool:
        body = await self.request("DELETE", f"/api/cart/user/{user_id}")
        return bool(body.get("success"))

    # --- Razorpay ---

    async def create_razorpay_order(
        self,
        amount: Decimal,
        currency: str = "INR",
        receipt: Optional[str] = None,
        notes: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        payload = {"amount": str(amount), "currency": currency, "receipt": receipt, "notes": notes or {}}
        return await self.request("POST", "/api/payments/razorpay/create-order", json=payload)

    async def verify_razorpay_payment(self, order_id: str, payment_id: str, signature: str) -> Dict[str, Any]:
        payload = {
            "razorpay_order_id": order_id,
            "razorpay_payment_id": payment_id,
            "razorpay_signature": signature,
        }
        return await self.request("POST", "/api/payments/razorpay/verify", json=payload)
