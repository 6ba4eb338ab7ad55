from typing import List, Optional

from sqlalchemy import and_, delete, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from shared.exceptions import ConflictError
from shared.storage import MemoryStore, stamp, translate_errors, utcnow

from .models import Category, Product
from .schemas import ProductFilters

DUPLICATE_PRODUCT = "Product with this name already exists"
DUPLICATE_CATEGORY = "Category with this name already exists"


class SqlProductRepository:
    store_name = "database"

    def __init__(self, db: AsyncSession):
        self.db = db

    async def ping(self) -> None:
        async with translate_errors(self.db):
            await self.db.execute(select(Product.id).limit(1))

    async def list_products(self, filters: ProductFilters) -> List[Product]:
        conditions = []
        if filters.category:
            conditions.append(Product.category == filters.category)
        if filters.featured is not None:
            conditions.append(Product.featured == filters.featured)
        if filters.search:
            pattern = f"%{filters.search}%"
            conditions.append(or_(Product.name.like(pattern), Product.description.like(pattern)))

        query = select(Product).order_by(Product.created_at)
        if conditions:
            query = query.where(and_(*conditions))
        if filters.limit:
            query = query.limit(filters.limit)
        if filters.offset:
            query = query.offset(filters.offset)

        async with translate_errors(self.db):
            result = await self.db.execute(query)
            return list(result.scalars().all())

    async def get_product(self, product_id: str) -> Optional[Product]:
        async with translate_errors(self.db):
            return await self.db.get(Product, product_id)

    async def create_product(self, product: Product) -> Product:
        async with translate_errors(self.db, DUPLICATE_PRODUCT):
            self.db.add(product)
            await self.db.commit()
            await self.db.refresh(product)
            return product

    async def update_product(self, product_id: str, changes: dict) -> Optional[Product]:
        async with translate_errors(self.db, DUPLICATE_PRODUCT):
            product = await self.db.get(Product, product_id)
            if not product:
                return None
            for field, value in changes.items():
                setattr(product, field, value)
            product.updated_at = utcnow()
            await self.db.commit()
            await self.db.refresh(product)
            return product

    async def delete_product(self, product_id: str) -> bool:
        async with translate_errors(self.db):
            result = await self.db.execute(delete(Product).where(Product.id == product_id))
            await self.db.commit()
            return (result.rowcount or 0) > 0

    async def list_categories(self) -> List[Category]:
        async with translate_errors(self.db):
            result = await self.db.execute(select(Category).order_by(Category.created_at))
            return list(result.scalars().all())

    async def create_category(self, category: Category) -> Category:
        async with translate_errors(self.db, DUPLICATE_CATEGORY):
            self.db.add(category)
            await self.db.commit()
            await self.db.refresh(category)
            return category


class InMemoryProductRepository:
    store_name = "memory"

    def __init__(self, store: MemoryStore):
        self.store = store

    async def ping(self) -> None:
        return None

    async def list_products(self, filters: ProductFilters) -> List[Product]:
        products = self.store.rows("products")
        if filters.category:
            products = [p for p in products if p.category == filters.category]
        if filters.featured is not None:
            products = [p for p in products if p.featured == filters.featured]
        if filters.search:
            needle = filters.search
            products = [
                p for p in products
                if needle in p.name or needle in (p.description or "")
            ]
        start = filters.offset or 0
        end = start + filters.limit if filters.limit else None
        return products[start:end]

    async def get_product(self, product_id: str) -> Optional[Product]:
        return self.store.table("products").get(product_id)

    async def create_product(self, product: Product) -> Product:
        if any(p.name == product.name for p in self.store.rows("products")):
            raise ConflictError(DUPLICATE_PRODUCT)
        return self.store.insert("products", product)

    async def update_product(self, product_id: str, changes: dict) -> Optional[Product]:
        product = self.store.table("products").get(product_id)
        if not product:
            return None
        for field, value in changes.items():
            setattr(product, field, value)
        return stamp(product)

    async def delete_product(self, product_id: str) -> bool:
        return self.store.table("products").pop(product_id, None) is not None

    async def list_categories(self) -> List[Category]:
        return self.store.rows("categories")

    async def create_category(self, category: Category) -> Category:
        if any(c.name == category.name for c in self.store.rows("categories")):
            raise ConflictError(DUPLICATE_CATEGORY)
        return self.store.insert("categories", category)
