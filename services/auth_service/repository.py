from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from shared.exceptions import ConflictError
from shared.storage import MemoryStore, translate_errors

from .models import User

DUPLICATE_USER = "User already exists"


class SqlUserRepository:
    store_name = "database"

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create(self, user: User) -> User:
        async with translate_errors(self.db, DUPLICATE_USER):
            self.db.add(user)
            await self.db.commit()
            await self.db.refresh(user)
            return user

    async def get_by_id(self, user_id: str) -> Optional[User]:
        async with translate_errors(self.db):
            return await self.db.get(User, user_id)

    async def get_by_email(self, email: str) -> Optional[User]:
        async with translate_errors(self.db):
            result = await self.db.execute(select(User).where(User.email == email))
            return result.scalars().first()


class InMemoryUserRepository:
    store_name = "memory"

    def __init__(self, store: MemoryStore):
        self.store = store

    async def create(self, user: User) -> User:
        if await self.get_by_email(user.email):
            raise ConflictError(DUPLICATE_USER)
        return self.store.insert("users", user)

    async def get_by_id(self, user_id: str) -> Optional[User]:
        return self.store.table("users").get(user_id)

    async def get_by_email(self, email: str) -> Optional[User]:
        return next((u for u in self.store.rows("users") if u.email == email), None)
