from datetime import datetime
from typing import Optional

from pydantic import BaseModel, EmailStr, Field

from services.payment_service.schemas import CheckoutSession, PaymentVerify


class CheckoutItem(BaseModel):
    product_id: int
    quantity: int = Field(..., ge=1, le=100)


class CheckoutRequest(BaseModel):
    items: list[CheckoutItem] = Field(..., min_length=1)
    customer_name: str = Field(..., min_length=1, max_length=255)
    customer_email: EmailStr
    customer_phone: str = Field(..., pattern=r"^\d{10}$")
    shipping_address: str = Field(..., min_length=1)
    buyer_gstin: Optional[str] = Field(None, max_length=15)
    buyer_state_code: Optional[str] = Field(None, pattern=r"^\d{2}$")


class OrderCheckout(CheckoutSession):
    id: int
    order_number: str
    subtotal: float
    shipping_cost: float
    taxable_amount: float
    cgst_amount: float
    sgst_amount: float
    igst_amount: float


class OrderVerify(PaymentVerify):
    order_number: str


class OrderStatusUpdate(BaseModel):
    order_status: str


class OrderItemResponse(BaseModel):
    id: int
    item_type: str
    item_id: Optional[int]
    item_name: str
    quantity: int
    unit_price: float
    total_price: float

    class Config:
        from_attributes = True


class OrderResponse(BaseModel):
    id: int
    order_number: str
    user_id: int
    customer_name: str
    customer_email: str
    customer_phone: str
    shipping_address: str
    subtotal: float
    shipping_cost: float
    taxable_amount: float
    cgst_amount: float
    sgst_amount: float
    igst_amount: float
    total_amount: float
    buyer_gstin: Optional[str]
    buyer_state: Optional[str]
    buyer_state_code: Optional[str]
    payment_status: str
    order_status: str
    razorpay_order_id: Optional[str]
    razorpay_payment_id: Optional[str]
    invoice_number: Optional[str]
    invoice_url: Optional[str]
    invoice_generated_at: Optional[datetime]
    created_at: Optional[datetime] = None
    items: list[OrderItemResponse] = []

    class Config:
        from_attributes = True
