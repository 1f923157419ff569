from datetime import date, datetime
from typing import Literal, Optional

from pydantic import BaseModel, EmailStr, Field

from services.payment_service.schemas import CheckoutSession, PaymentVerify

from .experiences import MAX_EXPERIENCE_GUESTS, MIN_EXPERIENCE_GUESTS

PHONE_PATTERN = r"^\d{10}$"


class CustomerDetails(BaseModel):
    customer_name: str = Field(..., min_length=1, max_length=255)
    customer_email: EmailStr
    customer_phone: str = Field(..., pattern=PHONE_PATTERN, description="10-digit mobile number")


class WorkshopBookingCreate(CustomerDetails):
    workshop_id: int
    booking_date: date
    time_slot: str = Field(..., min_length=1)
    guests: int = Field(..., ge=1)


class ExperienceBookingCreate(CustomerDetails):
    experience_type: Literal["couple", "birthday", "farm", "studio"]
    booking_date: date
    time_slot: str = Field(..., min_length=1)
    guests: int = Field(..., ge=MIN_EXPERIENCE_GUESTS, le=MAX_EXPERIENCE_GUESTS)
    notes: Optional[str] = Field(None, max_length=2000)


class BookingVerify(PaymentVerify):
    booking_id: int


class WorkshopCheckout(CheckoutSession):
    booking_id: int
    workshop_title: str


class ExperienceCheckout(CheckoutSession):
    booking_id: int
    experience_title: str


class BookingStatusUpdate(BaseModel):
    booking_status: str


class ExperienceView(BaseModel):
    id: str
    title: str
    duration: str
    price: float
    per_person: bool


class ExperienceCatalog(BaseModel):
    experiences: list[ExperienceView]
    time_slots: list[str]
    min_guests: int
    max_guests: int


class _BookingBase(BaseModel):
    id: int
    user_id: int
    booking_date: date
    time_slot: str
    guests: int
    total_amount: float
    customer_name: str
    customer_email: str
    customer_phone: str
    payment_status: str
    booking_status: str
    razorpay_order_id: Optional[str]
    razorpay_payment_id: Optional[str]
    notes: Optional[str]
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class WorkshopBookingResponse(_BookingBase):
    workshop_id: int


class ExperienceBookingResponse(_BookingBase):
    experience_type: str


class MyBookings(BaseModel):
    workshops: list[WorkshopBookingResponse]
    experiences: list[ExperienceBookingResponse]
