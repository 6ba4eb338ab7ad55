from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

CENTS = Decimal("0.01")


def quantize_money(value: Optional[Decimal]) -> Optional[Decimal]:
    return None if value is None else value.quantize(CENTS)


class ProductCreate(BaseModel):
    # name, price and category are checked by the service so the caller gets
    # one message naming all three
    name: Optional[str] = None
    description: Optional[str] = None
    price: Optional[Decimal] = Field(default=None, ge=0)
    original_price: Optional[Decimal] = Field(default=None, ge=0)
    category: Optional[str] = None
    images: List[str] = []
    stock: int = Field(default=0, ge=0)
    rating: Decimal = Field(default=Decimal("0"), ge=0, le=5)
    review_count: int = Field(default=0, ge=0)
    featured: bool = False
    tags: List[str] = []

    @field_validator("price", "original_price")
    @classmethod
    def quantize_prices(cls, value):
        return quantize_money(value)


class ProductUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    price: Optional[Decimal] = Field(default=None, ge=0)
    original_price: Optional[Decimal] = Field(default=None, ge=0)
    category: Optional[str] = Field(default=None, min_length=1)
    images: Optional[List[str]] = None
    stock: Optional[int] = Field(default=None, ge=0)
    rating: Optional[Decimal] = Field(default=None, ge=0, le=5)
    review_count: Optional[int] = Field(default=None, ge=0)
    featured: Optional[bool] = None
    tags: Optional[List[str]] = None

    @field_validator("price", "original_price")
    @classmethod
    def quantize_prices(cls, value):
        return quantize_money(value)


class ProductFilters(BaseModel):
    category: Optional[str] = None
    featured: Optional[bool] = None
    search: Optional[str] = None
    limit: Optional[int] = Field(default=None, ge=1)
    offset: Optional[int] = Field(default=None, ge=0)


class ProductResponse(BaseModel):
    id: str
    name: str
    description: Optional[str] = None
    price: Decimal
    original_price: Optional[Decimal] = None
    category: str
    images: List[str] = []
    stock: int
    rating: Decimal
    review_count: int
    featured: bool
    tags: List[str] = []
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ProductEnvelope(BaseModel):
    product: ProductResponse


class ProductListEnvelope(BaseModel):
    products: List[ProductResponse]


class CategoryCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=120)
    description: Optional[str] = None
    image: Optional[str] = None


class CategoryResponse(BaseModel):
    id: str
    name: str
    description: Optional[str] = None
    image: Optional[str] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class CategoryEnvelope(BaseModel):
    category: CategoryResponse


class CategoryListEnvelope(BaseModel):
    categories: List[CategoryResponse]
