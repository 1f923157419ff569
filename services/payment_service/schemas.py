from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class PaymentVerify(BaseModel):
    razorpay_order_id: str
    razorpay_payment_id: str
    razorpay_signature: str


class CheckoutSession(BaseModel):
    """What the hosted checkout widget needs to open."""
    order_id: str
    amount: float
    currency: str = "INR"
    key_id: str


class PaymentResponse(BaseModel):
    id: int
    purpose: str
    reference_id: Optional[int]
    amount: float
    currency: str
    gateway_order_id: str
    gateway_payment_id: Optional[str]
    status: str
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
