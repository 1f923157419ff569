from typing import Literal, Optional

from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from services.payment_service.gateway import PaymentGateway, get_payment_gateway
from shared.config.database import get_db
from shared.security import CurrentUser, get_current_user, limiter, require_admin
from shared.security.rate_limiter import CHECKOUT_RATE_LIMIT

from .schemas import (
    BookingStatusUpdate,
    BookingVerify,
    ExperienceBookingCreate,
    ExperienceBookingResponse,
    ExperienceCatalog,
    ExperienceCheckout,
    MyBookings,
    WorkshopBookingCreate,
    WorkshopBookingResponse,
    WorkshopCheckout,
)
from .service import BookingService

BookingKind = Literal["workshop", "experience"]

public_router = APIRouter()
router = APIRouter()
admin_router = APIRouter(prefix="/admin", dependencies=[Depends(require_admin)])

@public_router.get("/health", include_in_schema=False)
async def health_check():
    return {"service": "booking", "status": "running"}


@public_router.get("/experiences", response_model=ExperienceCatalog)
async def experience_catalog():
    return BookingService.catalog()


# --- Customer checkout ---

@router.post("/workshops/checkout", response_model=WorkshopCheckout, status_code=status.HTTP_201_CREATED)
@limiter.limit(CHECKOUT_RATE_LIMIT)
async def create_workshop_order(
    request: Request,
    payload: WorkshopBookingCreate,
    user: CurrentUser = Depends(get_current_user),
    gateway: PaymentGateway = Depends(get_payment_gateway),
    db: AsyncSession = Depends(get_db),
):
    return await BookingService.create_workshop_order(db, gateway, user, payload)


@router.post("/workshops/verify", response_model=WorkshopBookingResponse)
async def verify_workshop_payment(
    payload: BookingVerify,
    user: CurrentUser = Depends(get_current_user),
    gateway: PaymentGateway = Depends(get_payment_gateway),
    db: AsyncSession = Depends(get_db),
):
    return await BookingService.verify_workshop_payment(db, gateway, user, payload)


@router.post("/experiences/checkout", response_model=ExperienceCheckout, status_code=status.HTTP_201_CREATED)
@limiter.limit(CHECKOUT_RATE_LIMIT)
async def create_experience_order(
    request: Request,
    payload: ExperienceBookingCreate,
    user: CurrentUser = Depends(get_current_user),
    gateway: PaymentGateway = Depends(get_payment_gateway),
    db: AsyncSession = Depends(get_db),
):
    return await BookingService.create_experience_order(db, gateway, user, payload)


@router.post("/experiences/verify", response_model=ExperienceBookingResponse)
async def verify_experience_payment(
    payload: BookingVerify,
    user: CurrentUser = Depends(get_current_user),
    gateway: PaymentGateway = Depends(get_payment_gateway),
    db: AsyncSession = Depends(get_db),
):
    return await BookingService.verify_experience_payment(db, gateway, user, payload)


@router.get("/me", response_model=MyBookings)
async def my_bookings(user: CurrentUser = Depends(get_current_user), db: AsyncSession = Depends(get_db)):
    return await BookingService.my_bookings(db, user)


# --- Back office ---

@admin_router.get("/workshops/{workshop_id}", response_model=list[WorkshopBookingResponse])
async def workshop_bookings(workshop_id: int, db: AsyncSession = Depends(get_db)):
    return await BookingService.list_workshop_bookings(db, workshop_id)


@admin_router.get("/experiences", response_model=list[ExperienceBookingResponse])
async def experience_bookings(
    filter: str = Query("all"),
    search: Optional[str] = Query(None, max_length=100),
    db: AsyncSession = Depends(get_db),
):
    return await BookingService.list_experience_bookings(db, filter, search)


@admin_router.post("/experiences/expire")
async def expire_experience_bookings(db: AsyncSession = Depends(get_db)):
    completed = await BookingService.expire_experience_bookings(db)
    return {"completed": completed}


@admin_router.patch("/{kind}/{booking_id}/status")
async def update_booking_status(
    kind: BookingKind,
    booking_id: int,
    payload: BookingStatusUpdate,
    db: AsyncSession = Depends(get_db),
):
    booking = await BookingService.update_status(db, kind, booking_id, payload.booking_status)
    if kind == "workshop":
        return WorkshopBookingResponse.model_validate(booking)
    return ExperienceBookingResponse.model_validate(booking)


@admin_router.delete("/{kind}/{booking_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_booking(kind: BookingKind, booking_id: int, db: AsyncSession = Depends(get_db)):
    await BookingService.delete_booking(db, kind, booking_id)
