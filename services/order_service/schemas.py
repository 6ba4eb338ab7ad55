import re
from datetime import datetime
from decimal import Decimal
from typing import List, Literal, Optional

from email_validator import EmailNotValidError, validate_email
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_core import PydanticCustomError

from services.product_service.schemas import quantize_money

DIGITS = re.compile(r"^\d+$")

# field -> (minimum length, message)
MINIMUM_LENGTHS = {
    "full_name": (2, "Full name is required"),
    "phone": (10, "Valid phone number is required"),
    "address": (10, "Complete address is required"),
    "city": (2, "City is required"),
    "state": (2, "State is required"),
    "zip_code": (5, "ZIP code is required"),
}
EMAIL_MESSAGE = "Valid email address is required"
PHONE_DIGITS_MESSAGE = "Phone number must contain only digits"


def _reject(message: str) -> PydanticCustomError:
    return PydanticCustomError("shipping_field", message)


class ShippingAddress(BaseModel):
    """
    Shipping details collected at checkout. Every rule reports a message
    meant for display next to the offending field.
    """

    model_config = ConfigDict(validate_default=True)

    full_name: str = ""
    email: str = ""
    phone: str = ""
    address: str = ""
    city: str = ""
    state: str = ""
    zip_code: str = ""
    country: str = "India"

    @field_validator("full_name", "phone", "address", "city", "state", "zip_code")
    @classmethod
    def check_length(cls, value: str, info):
        minimum, message = MINIMUM_LENGTHS[info.field_name]
        if len(value) < minimum:
            raise _reject(message)
        if info.field_name == "phone" and not DIGITS.match(value):
            raise _reject(PHONE_DIGITS_MESSAGE)
        return value

    @field_validator("email")
    @classmethod
    def check_email(cls, value: str):
        try:
            validate_email(value, check_deliverability=False)
        except EmailNotValidError:
            raise _reject(EMAIL_MESSAGE) from None
        return value


class OrderItemCreate(BaseModel):
    product_id: Optional[str] = None
    product_name: str = Field(..., min_length=1)
    price: Decimal = Field(..., ge=0)
    quantity: int = Field(default=1, ge=1)


class OrderCreate(BaseModel):
    id: Optional[str] = Field(default=None, min_length=1, max_length=64)
    user_id: Optional[str] = None
    items: List[OrderItemCreate] = []
    status: Literal["confirmed", "pending", "cancelled"] = "pending"
    shipping_address: ShippingAddress
    payment_method: str = Field(..., min_length=1)
    transaction_id: Optional[str] = None
    estimated_delivery: Optional[datetime] = None
    clear_cart: bool = False


class OrderItemResponse(BaseModel):
    id: str
    product_id: Optional[str] = None
    product_name: str
    unit_price: Decimal
    quantity: int

    model_config = ConfigDict(from_attributes=True)

    @field_validator("unit_price")
    @classmethod
    def quantize_price(cls, value):
        return quantize_money(value)


class OrderResponse(BaseModel):
    id: str
    user_id: Optional[str] = None
    total: Decimal
    status: str
    shipping_address: dict
    payment_method: str
    transaction_id: Optional[str] = None
    estimated_delivery: Optional[datetime] = None
    created_at: datetime
    items: List[OrderItemResponse] = []

    model_config = ConfigDict(from_attributes=True)

    @field_validator("total")
    @classmethod
    def quantize_total(cls, value):
        return quantize_money(value)


class OrderEnvelope(BaseModel):
    order: OrderResponse


class OrderListEnvelope(BaseModel):
    orders: List[OrderResponse]
