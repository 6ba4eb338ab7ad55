from datetime import datetime
from typing import List

from pydantic import BaseModel, ConfigDict, Field


class CartItemCreate(BaseModel):
    user_id: str = Field(..., min_length=1)
    product_id: str = Field(..., min_length=1)
    quantity: int = Field(default=1, ge=1)


class CartItemUpdate(BaseModel):
    quantity: int = Field(..., ge=1)


class CartItemResponse(BaseModel):
    id: str
    user_id: str
    product_id: str
    quantity: int
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class CartItemEnvelope(BaseModel):
    item: CartItemResponse


class CartItemListEnvelope(BaseModel):
    items: List[CartItemResponse]


class WishlistItemCreate(BaseModel):
    user_id: str = Field(..., min_length=1)
    product_id: str = Field(..., min_length=1)


class WishlistItemResponse(BaseModel):
    id: str
    user_id: str
    product_id: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class WishlistItemEnvelope(BaseModel):
    item: WishlistItemResponse


class WishlistItemListEnvelope(BaseModel):
    items: List[WishlistItemResponse]


class SuccessResponse(BaseModel):
    success: bool
