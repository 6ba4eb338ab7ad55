from typing import Optional

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from shared.config.database import get_db

from .repository import InMemoryOrderRepository, SqlOrderRepository
from .schemas import OrderCreate, OrderEnvelope, OrderListEnvelope
from .service import OrderService

router = APIRouter(prefix="/orders", tags=["Orders"])


def get_order_service(request: Request, db: Optional[AsyncSession] = Depends(get_db)) -> OrderService:
    repo, fallback = request.app.state.stores.repositories(db, SqlOrderRepository, InMemoryOrderRepository)
    return OrderService(repo, fallback)


@router.get("/{user_id}", response_model=OrderListEnvelope)
async def get_orders(user_id: str, service: OrderService = Depends(get_order_service)):
    return {"orders": await service.get_orders(user_id)}


@router.post("", response_model=OrderEnvelope, status_code=status.HTTP_201_CREATED)
async def place_order(payload: OrderCreate, service: OrderService = Depends(get_order_service)):
    return {"order": await service.place_order(payload)}
