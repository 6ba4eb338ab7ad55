from enum import Enum
from typing import List

import structlog

from shared.exceptions import NotFoundError, ValidationError
from shared.storage import StoreBackedService

from .models import Category, Product
from .schemas import CategoryCreate, ProductCreate, ProductFilters, ProductUpdate

logger = structlog.get_logger(__name__)

MISSING_PRODUCT_FIELDS = "Missing required fields: name, price, and category are required"


class DeleteOutcome(str, Enum):
    DELETED = "deleted"
    # The fallback store acknowledges deletes without checking for the record
    SIMULATED = "simulated"


class ProductService(StoreBackedService):
    resource = "products"

    async def list_products(self, filters: ProductFilters) -> List[Product]:
        products = await self._call(lambda repo: repo.list_products(filters))
        logger.info("products_listed", count=len(products), filters=filters.model_dump(exclude_none=True))
        return products

    async def get_product(self, product_id: str) -> Product:
        product = await self._call(lambda repo: repo.get_product(product_id))
        if not product:
            raise NotFoundError("Product not found")
        return product

    async def create_product(self, data: ProductCreate) -> Product:
        if not data.name or data.price is None or not data.category:
            raise ValidationError(MISSING_PRODUCT_FIELDS)
        values = data.model_dump()
        product = await self._call(lambda repo: repo.create_product(Product(**values)))
        logger.info("product_created", product_id=product.id, name=product.name)
        return product

    async def update_product(self, product_id: str, data: ProductUpdate) -> Product:
        changes = data.model_dump(exclude_unset=True)
        product = await self._call(lambda repo: repo.update_product(product_id, changes))
        if not product:
            raise NotFoundError("Product not found")
        logger.info("product_updated", product_id=product_id, fields=sorted(changes))
        return product

    async def delete_product(self, product_id: str) -> DeleteOutcome:
        deleted, from_fallback = await self._run(lambda repo: repo.delete_product(product_id))
        if from_fallback:
            return DeleteOutcome.SIMULATED
        if not deleted:
            raise NotFoundError("Product not found")
        logger.info("product_deleted", product_id=product_id)
        return DeleteOutcome.DELETED

    async def check_health(self) -> str:
        """Returns the name of the store that answered."""
        await self.repo.ping()
        return self.repo.store_name


class CategoryService(StoreBackedService):
    resource = "categories"

    async def list_categories(self) -> List[Category]:
        return await self._call(lambda repo: repo.list_categories())

    async def create_category(self, data: CategoryCreate) -> Category:
        values = data.model_dump()
        category = await self._call(lambda repo: repo.create_category(Category(**values)))
        logger.info("category_created", category_id=category.id, name=category.name)
        return category
