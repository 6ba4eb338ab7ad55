from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, computed_field, field_validator

from services.product_service.schemas import quantize_money


class TransactionCreate(BaseModel):
    order_id: str = Field(..., min_length=1)
    user_id: Optional[str] = None
    provider: str = Field(..., min_length=1)
    payment_id: Optional[str] = None
    amount: Decimal = Field(..., ge=0)
    currency: str = "INR"
    status: str = "pending"
    details: Dict[str, Any] = {}


class TransactionUpdate(BaseModel):
    payment_id: Optional[str] = None
    amount: Optional[Decimal] = Field(default=None, ge=0)
    status: Optional[str] = None
    details: Optional[Dict[str, Any]] = None


class TransactionResponse(BaseModel):
    id: str
    order_id: str
    user_id: Optional[str] = None
    provider: str
    payment_id: Optional[str] = None
    amount: Decimal
    currency: str
    status: str
    details: Dict[str, Any]
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)

    @field_validator("amount")
    @classmethod
    def quantize_amount(cls, value):
        return quantize_money(value)


class TransactionEnvelope(BaseModel):
    transaction: TransactionResponse


class TransactionEventCreate(BaseModel):
    transaction_id: str = Field(..., min_length=1)
    event_type: str = Field(..., min_length=1)
    status: Optional[str] = None
    payload: Dict[str, Any] = {}


class TransactionEventResponse(BaseModel):
    id: str
    transaction_id: str
    event_type: str
    status: Optional[str] = None
    payload: Dict[str, Any]
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class TransactionEventEnvelope(BaseModel):
    event: TransactionEventResponse


# --- Stripe ---

class PaymentIntentRequest(BaseModel):
    amount: Decimal = Field(..., gt=0)
    currency: str = "usd"
    metadata: Dict[str, str] = {}


class PaymentIntentResponse(BaseModel):
    client_secret: str
    payment_intent_id: str

    # camelCase copies for browser clients that read Stripe.js style names
    @computed_field
    @property
    def clientSecret(self) -> str:
        return self.client_secret

    @computed_field
    @property
    def paymentIntentId(self) -> str:
        return self.payment_intent_id


# --- Razorpay ---

class RazorpayOrderRequest(BaseModel):
    # Checked by the gateway so a missing amount reports "Invalid amount"
    amount: Optional[Decimal] = None
    currency: Optional[str] = None
    receipt: Optional[str] = None
    notes: Dict[str, Any] = {}


class RazorpayVerifyRequest(BaseModel):
    """Accepts the provider's snake_case callback fields or their camelCase form."""

    razorpay_order_id: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("razorpay_order_id", "razorpayOrderId")
    )
    razorpay_payment_id: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("razorpay_payment_id", "razorpayPaymentId")
    )
    razorpay_signature: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("razorpay_signature", "razorpaySignature")
    )
