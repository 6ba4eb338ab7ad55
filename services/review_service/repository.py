from typing import List

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from shared.storage import MemoryStore, translate_errors

from .models import Review


class SqlReviewRepository:
    store_name = "database"

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_reviews(self, product_id: str) -> List[Review]:
        async with translate_errors(self.db):
            result = await self.db.execute(
                select(Review).where(Review.product_id == product_id).order_by(Review.created_at)
            )
            return list(result.scalars().all())

    async def create_review(self, review: Review) -> Review:
        async with translate_errors(self.db):
            self.db.add(review)
            await self.db.commit()
            await self.db.refresh(review)
            return review


class InMemoryReviewRepository:
    store_name = "memory"

    def __init__(self, store: MemoryStore):
        self.store = store

    async def list_reviews(self, product_id: str) -> List[Review]:
        return [r for r in self.store.rows("reviews") if r.product_id == product_id]

    async def create_review(self, review: Review) -> Review:
        return self.store.insert("reviews", review)
