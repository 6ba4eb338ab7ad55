"""
Payment provider adapters.

Stripe goes through the official SDK unless no real secret key is
configured, in which case synthetic intents are returned. Razorpay order
creation and verification are development stand-ins: no provider API is
called and no signature is checked, so every well-formed verification
request succeeds.
"""
import asyncio
import random
import string
import time
from decimal import Decimal
from typing import Any, Dict, Optional

import stripe
import structlog

from shared.config.settings import Settings
from shared.exceptions import StorefrontError, ValidationError
from shared.observability.metrics import storefront_payment_events_total

logger = structlog.get_logger(__name__)


class PaymentProviderError(StorefrontError):
    """The payment provider rejected or failed a request."""


def _now_ms() -> int:
    return int(time.time() * 1000)


def _random_suffix(length: int) -> str:
    return "".join(random.choices(string.ascii_lowercase + string.digits, k=length))


def _minor_units(amount: Decimal) -> int:
    return int(round(amount * 100))


class StripeGateway:
    def __init__(self, settings: Settings):
        self.secret_key = settings.stripe_secret_key
        self.webhook_secret = settings.stripe_webhook_secret
        self.dev_mode = settings.stripe_dev_mode

    async def create_payment_intent(
        self, amount: Decimal, currency: str = "usd", metadata: Optional[Dict[str, str]] = None
    ) -> Dict[str, str]:
        if self.dev_mode:
            stamp = _now_ms()
            storefront_payment_events_total.labels(provider="stripe", outcome="intent_simulated").inc()
            return {
                "client_secret": f"pi_test_{stamp}_secret_{_random_suffix(9)}",
                "payment_intent_id": f"pi_test_{stamp}",
            }

        try:
            # The SDK is blocking; keep it off the event loop
            intent = await asyncio.to_thread(
                stripe.PaymentIntent.create,
                api_key=self.secret_key,
                amount=_minor_units(amount),
                currency=currency,
                metadata=metadata or {},
                automatic_payment_methods={"enabled": True},
            )
        except stripe.StripeError as exc:
            storefront_payment_events_total.labels(provider="stripe", outcome="intent_failed").inc()
            logger.error("stripe_intent_failed", error=str(exc))
            raise PaymentProviderError(f"Error creating payment intent: {exc.user_message or exc}") from exc

        storefront_payment_events_total.labels(provider="stripe", outcome="intent_created").inc()
        logger.info("stripe_intent_created", payment_intent_id=intent.id, amount=str(amount), currency=currency)
        return {"client_secret": intent.client_secret, "payment_intent_id": intent.id}

    def handle_webhook(self, payload: bytes, signature: Optional[str]) -> None:
        """Verifies and logs a webhook delivery. Development mode only acknowledges."""
        if self.dev_mode:
            return

        if not signature or not self.webhook_secret:
            storefront_payment_events_total.labels(provider="stripe", outcome="webhook_rejected").inc()
            raise ValidationError("Missing signature or webhook secret")

        try:
            event = stripe.Webhook.construct_event(payload, signature, self.webhook_secret)
        except (ValueError, stripe.SignatureVerificationError) as exc:
            storefront_payment_events_total.labels(provider="stripe", outcome="webhook_rejected").inc()
            raise ValidationError(f"Webhook signature verification failed: {exc}") from exc

        intent = event["data"]["object"]
        if event["type"] == "payment_intent.succeeded":
            logger.info("stripe_payment_succeeded", payment_intent_id=intent["id"], amount=intent["amount"])
        elif event["type"] == "payment_intent.payment_failed":
            logger.warning("stripe_payment_failed", payment_intent_id=intent["id"])
        else:
            logger.info("stripe_event_unhandled", event_type=event["type"])
        storefront_payment_events_total.labels(provider="stripe", outcome="webhook_received").inc()


class RazorpayGateway:
    def __init__(self, settings: Settings):
        self.key_id = settings.razorpay_key_id

    def create_order(
        self,
        amount: Optional[Decimal],
        currency: Optional[str] = None,
        receipt: Optional[str] = None,
        notes: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        if amount is None or amount <= 0:
            raise ValidationError("Invalid amount")

        paise = _minor_units(amount)
        order = {
            "id": f"order_{_now_ms()}_{_random_suffix(6)}",
            "entity": "order",
            "amount": paise,
            "amount_paid": 0,
            "amount_due": paise,
            "currency": currency or "INR",
            "receipt": receipt,
            "status": "created",
            "attempts": 0,
            "notes": notes or {},
            "created_at": int(time.time()),
        }
        storefront_payment_events_total.labels(provider="razorpay", outcome="order_created").inc()
        logger.info("razorpay_order_created", order_id=order["id"], amount=paise, receipt=receipt)
        return order

    def verify_payment(
        self,
        order_id: Optional[str],
        payment_id: Optional[str],
        signature: Optional[str],
    ) -> Dict[str, Any]:
        if not order_id or not payment_id or not signature:
            raise ValidationError("Missing payment verification data")

        # Stand-in: the signature is accepted as-is
        storefront_payment_events_total.labels(provider="razorpay", outcome="verified").inc()
        logger.info("razorpay_payment_verified", order_id=order_id, payment_id=payment_id)
        return {
            "verified": True,
            "payment_id": payment_id,
            "order_id": order_id,
            "status": "captured",
            "amount": 100,
            "timestamp": _now_ms(),
        }
