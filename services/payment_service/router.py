from typing import Optional

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from shared.config.database import get_db

from .gateways import PaymentProviderError, RazorpayGateway, StripeGateway
from .repository import InMemoryTransactionRepository, SqlTransactionRepository
from .schemas import (
    PaymentIntentRequest,
    PaymentIntentResponse,
    RazorpayOrderRequest,
    RazorpayVerifyRequest,
    TransactionCreate,
    TransactionEnvelope,
    TransactionEventCreate,
    TransactionEventEnvelope,
    TransactionUpdate,
)
from .service import TransactionService

router = APIRouter(tags=["Transactions"])
stripe_router = APIRouter(tags=["Stripe"])
razorpay_router = APIRouter(prefix="/payments/razorpay", tags=["Razorpay"])


def get_transaction_service(
    request: Request, db: Optional[AsyncSession] = Depends(get_db)
) -> TransactionService:
    repo, fallback = request.app.state.stores.repositories(
        db, SqlTransactionRepository, InMemoryTransactionRepository
    )
    return TransactionService(repo, fallback)


def get_stripe_gateway(request: Request) -> StripeGateway:
    return StripeGateway(request.app.state.settings)


def get_razorpay_gateway(request: Request) -> RazorpayGateway:
    return RazorpayGateway(request.app.state.settings)


@router.post("/transactions", response_model=TransactionEnvelope, status_code=status.HTTP_201_CREATED)
async def create_transaction(
    payload: TransactionCreate, service: TransactionService = Depends(get_transaction_service)
):
    return {"transaction": await service.create_transaction(payload)}


@router.put("/transactions/{order_id}", response_model=TransactionEnvelope)
async def update_transaction(
    order_id: str,
    payload: TransactionUpdate,
    service: TransactionService = Depends(get_transaction_service),
):
    return {"transaction": await service.update_transaction(order_id, payload)}


@router.post("/transaction-events", response_model=TransactionEventEnvelope, status_code=status.HTTP_201_CREATED)
async def record_transaction_event(
    payload: TransactionEventCreate, service: TransactionService = Depends(get_transaction_service)
):
    return {"event": await service.record_event(payload)}


@stripe_router.post("/create-payment-intent", response_model=PaymentIntentResponse)
async def create_payment_intent(payload: PaymentIntentRequest, gateway: StripeGateway = Depends(get_stripe_gateway)):
    try:
        return await gateway.create_payment_intent(payload.amount, payload.currency, payload.metadata)
    except PaymentProviderError as exc:
        return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content={"message": exc.message})


@stripe_router.post("/stripe-webhook")
async def stripe_webhook(request: Request, gateway: StripeGateway = Depends(get_stripe_gateway)):
    # Signature verification needs the body exactly as sent
    payload = await request.body()
    gateway.handle_webhook(payload, request.headers.get("stripe-signature"))
    return {"received": True}


@razorpay_router.post("/create-order")
async def create_razorpay_order(
    payload: RazorpayOrderRequest, gateway: RazorpayGateway = Depends(get_razorpay_gateway)
):
    order = gateway.create_order(payload.amount, payload.currency, payload.receipt, payload.notes)
    return {"success": True, "order": order, "key_id": gateway.key_id}


@razorpay_router.post("/verify")
async def verify_razorpay_payment(
    payload: RazorpayVerifyRequest, gateway: RazorpayGateway = Depends(get_razorpay_gateway)
):
    verification = gateway.verify_payment(
        payload.razorpay_order_id, payload.razorpay_payment_id, payload.razorpay_signature
    )
    return {"success": True, "verified": verification["verified"], "verification": verification}
