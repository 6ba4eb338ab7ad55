from typing import List

import structlog

from shared.storage import StoreBackedService

from .models import Review
from .schemas import ReviewCreate

logger = structlog.get_logger(__name__)


class ReviewService(StoreBackedService):
    resource = "reviews"

    async def get_reviews(self, product_id: str) -> List[Review]:
        return await self._call(lambda repo: repo.list_reviews(product_id))

    async def create_review(self, data: ReviewCreate) -> Review:
        values = data.model_dump()
        review = await self._call(lambda repo: repo.create_review(Review(**values)))
        logger.info("review_created", review_id=review.id, product_id=review.product_id, rating=review.rating)
        return review
