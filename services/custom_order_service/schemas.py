from datetime import date, datetime
from typing import Literal, Optional

from pydantic import BaseModel, EmailStr, Field

EmailType = Literal["payment_request", "payment_confirmed", "in_delivery", "delivered", "custom"]


class CustomOrderCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    phone: Optional[str] = Field(None, pattern=r"^\d{10}$")
    preferred_size: Optional[str] = Field(None, max_length=255)
    usage_description: str = Field(..., min_length=1, max_length=5000)
    notes: Optional[str] = Field(None, max_length=5000)
    shipping_address: Optional[str] = None
    reference_images: list[str] = Field(default_factory=list, max_length=10)


class CustomOrderUpdate(BaseModel):
    status: Optional[str] = None
    admin_notes: Optional[str] = None
    estimated_price: Optional[float] = Field(None, ge=0)
    estimated_delivery_date: Optional[date] = None


class EmailRecord(BaseModel):
    type: EmailType
    message: Optional[str] = Field(None, max_length=5000)


class SentEmail(BaseModel):
    type: str
    sent_at: datetime


class CustomOrderResponse(BaseModel):
    id: int
    user_id: Optional[int]
    name: str
    email: str
    phone: Optional[str]
    preferred_size: Optional[str]
    usage_description: str
    notes: Optional[str]
    shipping_address: Optional[str]
    reference_images: list[str]
    status: str
    admin_notes: Optional[str]
    estimated_price: Optional[float]
    estimated_delivery_date: Optional[date]
    emails_sent: list[SentEmail]
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class CustomOrderCounts(BaseModel):
    pending: int
    in_progress: int
    delivered: int
