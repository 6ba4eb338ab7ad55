from typing import Optional

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from shared.config.database import get_db

from .repository import InMemoryReviewRepository, SqlReviewRepository
from .schemas import ReviewCreate, ReviewEnvelope, ReviewListEnvelope
from .service import ReviewService

router = APIRouter(prefix="/reviews", tags=["Reviews"])


def get_review_service(request: Request, db: Optional[AsyncSession] = Depends(get_db)) -> ReviewService:
    repo, fallback = request.app.state.stores.repositories(db, SqlReviewRepository, InMemoryReviewRepository)
    return ReviewService(repo, fallback)


@router.get("/{product_id}", response_model=ReviewListEnvelope)
async def get_reviews(product_id: str, service: ReviewService = Depends(get_review_service)):
    return {"reviews": await service.get_reviews(product_id)}


@router.post("", response_model=ReviewEnvelope, status_code=status.HTTP_201_CREATED)
async def create_review(payload: ReviewCreate, service: ReviewService = Depends(get_review_service)):
    return {"review": await service.create_review(payload)}
