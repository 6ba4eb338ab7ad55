from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class ReviewCreate(BaseModel):
    product_id: str = Field(..., min_length=1)
    user_id: str = Field(..., min_length=1)
    rating: int = Field(..., ge=1, le=5)
    title: Optional[str] = None
    comment: Optional[str] = None


class ReviewResponse(BaseModel):
    id: str
    product_id: str
    user_id: str
    rating: int
    title: Optional[str] = None
    comment: Optional[str] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ReviewEnvelope(BaseModel):
    review: ReviewResponse


class ReviewListEnvelope(BaseModel):
    reviews: List[ReviewResponse]
