from typing import Optional

from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from services.payment_service.gateway import PaymentGateway, get_payment_gateway
from shared.config.database import get_db
from shared.security import CurrentUser, get_current_user, limiter, require_admin
from shared.security.rate_limiter import CHECKOUT_RATE_LIMIT

from .schemas import CheckoutRequest, OrderCheckout, OrderResponse, OrderStatusUpdate, OrderVerify
from .service import OrderService

public_router = APIRouter()
router = APIRouter()
admin_router = APIRouter(prefix="/admin", dependencies=[Depends(require_admin)])

@public_router.get("/health", include_in_schema=False)
async def health_check():
    return {"service": "order", "status": "running"}


@router.post("/checkout", response_model=OrderCheckout, status_code=status.HTTP_201_CREATED)
@limiter.limit(CHECKOUT_RATE_LIMIT)
async def checkout(
    request: Request,
    payload: CheckoutRequest,
    user: CurrentUser = Depends(get_current_user),
    gateway: PaymentGateway = Depends(get_payment_gateway),
    db: AsyncSession = Depends(get_db),
):
    return await OrderService.checkout(db, gateway, user, payload)


@router.post("/verify", response_model=OrderResponse)
async def verify_payment(
    payload: OrderVerify,
    user: CurrentUser = Depends(get_current_user),
    gateway: PaymentGateway = Depends(get_payment_gateway),
    db: AsyncSession = Depends(get_db),
):
    return await OrderService.verify_payment(db, gateway, user, payload)


@router.get("/me", response_model=list[OrderResponse])
async def my_orders(user: CurrentUser = Depends(get_current_user), db: AsyncSession = Depends(get_db)):
    return await OrderService.my_orders(db, user)


@router.get("/me/{order_id}", response_model=OrderResponse)
async def my_order(order_id: int, user: CurrentUser = Depends(get_current_user), db: AsyncSession = Depends(get_db)):
    return await OrderService.get_own_order(db, user, order_id)


@admin_router.get("/", response_model=list[OrderResponse])
async def list_orders(
    order_status: Optional[str] = Query(None),
    payment_status: Optional[str] = Query(None),
    search: Optional[str] = Query(None, max_length=100),
    db: AsyncSession = Depends(get_db),
):
    return await OrderService.list_orders(db, order_status, payment_status, search)


@admin_router.get("/{order_id}", response_model=OrderResponse)
async def get_order(order_id: int, db: AsyncSession = Depends(get_db)):
    return await OrderService.get_order(db, order_id)


@admin_router.patch("/{order_id}/status", response_model=OrderResponse)
async def update_order_status(order_id: int, payload: OrderStatusUpdate, db: AsyncSession = Depends(get_db)):
    return await OrderService.update_status(db, order_id, payload.order_status)


@admin_router.delete("/{order_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_order(order_id: int, db: AsyncSession = Depends(get_db)):
    await OrderService.delete_order(db, order_id)
