from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request, Response, status
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from shared.config.database import get_db
from shared.exceptions import UpstreamUnavailable

from .repository import InMemoryProductRepository, SqlProductRepository
from .schemas import (
    CategoryCreate,
    CategoryEnvelope,
    CategoryListEnvelope,
    ProductCreate,
    ProductEnvelope,
    ProductFilters,
    ProductListEnvelope,
    ProductUpdate,
)
from .service import CategoryService, DeleteOutcome, ProductService

router = APIRouter(prefix="/products", tags=["Products"])
category_router = APIRouter(prefix="/categories", tags=["Categories"])
public_router = APIRouter()  # health check


def get_product_service(request: Request, db: Optional[AsyncSession] = Depends(get_db)) -> ProductService:
    repo, fallback = request.app.state.stores.repositories(db, SqlProductRepository, InMemoryProductRepository)
    return ProductService(repo, fallback)


def get_category_service(request: Request, db: Optional[AsyncSession] = Depends(get_db)) -> CategoryService:
    repo, fallback = request.app.state.stores.repositories(db, SqlProductRepository, InMemoryProductRepository)
    return CategoryService(repo, fallback)


@public_router.get("/health")
async def health_check(service: ProductService = Depends(get_product_service)):
    timestamp = datetime.now(timezone.utc).isoformat()
    try:
        store = await service.check_health()
    except UpstreamUnavailable as exc:
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={
                "status": "unhealthy",
                "database": "disconnected",
                "error": exc.message,
                "timestamp": timestamp,
            },
        )
    database = "connected" if store == "database" else "in-memory"
    return {"status": "healthy", "database": database, "timestamp": timestamp}


@router.get("", response_model=ProductListEnvelope)
async def list_products(
    category: Optional[str] = Query(default=None),
    featured: Optional[bool] = Query(default=None),
    search: Optional[str] = Query(default=None),
    limit: Optional[int] = Query(default=None, ge=1),
    offset: Optional[int] = Query(default=None, ge=0),
    service: ProductService = Depends(get_product_service),
):
    filters = ProductFilters(category=category, featured=featured, search=search, limit=limit, offset=offset)
    return {"products": await service.list_products(filters)}


@router.get("/{product_id}", response_model=ProductEnvelope)
async def get_product(product_id: str, service: ProductService = Depends(get_product_service)):
    return {"product": await service.get_product(product_id)}


@router.post("", response_model=ProductEnvelope, status_code=status.HTTP_201_CREATED)
async def create_product(payload: ProductCreate, service: ProductService = Depends(get_product_service)):
    return {"product": await service.create_product(payload)}


@router.put("/{product_id}", response_model=ProductEnvelope)
async def update_product(
    product_id: str,
    payload: ProductUpdate,
    service: ProductService = Depends(get_product_service),
):
    return {"product": await service.update_product(product_id, payload)}


@router.delete("/{product_id}")
async def delete_product(product_id: str, service: ProductService = Depends(get_product_service)):
    outcome = await service.delete_product(product_id)
    if outcome is DeleteOutcome.SIMULATED:
        return Response(status_code=status.HTTP_204_NO_CONTENT)
    return {"success": True}


@category_router.get("", response_model=CategoryListEnvelope)
async def list_categories(service: CategoryService = Depends(get_category_service)):
    return {"categories": await service.list_categories()}


@category_router.post("", response_model=CategoryEnvelope, status_code=status.HTTP_201_CREATED)
async def create_category(payload: CategoryCreate, service: CategoryService = Depends(get_category_service)):
    return {"category": await service.create_category(payload)}
