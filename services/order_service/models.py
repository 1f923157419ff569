from sqlalchemy import Column, DateTime, Float, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from shared.config.database import Base


class Order(Base):
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True, index=True)
    order_number = Column(String(40), unique=True, nullable=False, index=True)
    user_id = Column(Integer, nullable=False, index=True)
    customer_name = Column(String(255), nullable=False)
    customer_email = Column(String(255), nullable=False)
    customer_phone = Column(String(20), nullable=False)
    shipping_address = Column(Text, nullable=False)

    # Money: prices are GST-inclusive, tax is carved out of the subtotal
    subtotal = Column(Float, nullable=False)
    shipping_cost = Column(Float, default=0, nullable=False)
    taxable_amount = Column(Float, nullable=False)
    cgst_amount = Column(Float, default=0, nullable=False)
    sgst_amount = Column(Float, default=0, nullable=False)
    igst_amount = Column(Float, default=0, nullable=False)
    total_amount = Column(Float, nullable=False)

    buyer_gstin = Column(String(15), nullable=True)
    buyer_state = Column(String(100), nullable=True)
    buyer_state_code = Column(String(2), nullable=True)

    payment_status = Column(String(20), default="pending", nullable=False) # pending, paid, failed
    order_status = Column(String(20), default="pending", nullable=False)
    razorpay_order_id = Column(String(64), nullable=True, index=True)
    razorpay_payment_id = Column(String(64), nullable=True)

    invoice_number = Column(String(20), unique=True, nullable=True)
    invoice_url = Column(String(500), nullable=True)
    invoice_generated_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    items = relationship(
        "OrderItem",
        lazy="selectin",
        cascade="all, delete-orphan",
        order_by="OrderItem.id",
    )


class OrderItem(Base):
    __tablename__ = "order_items"

    id = Column(Integer, primary_key=True, index=True)
    order_id = Column(Integer, ForeignKey("orders.id"), nullable=False, index=True)
    item_type = Column(String(20), default="product", nullable=False) # product, workshop, experience
    item_id = Column(Integer, nullable=True)
    item_name = Column(String(255), nullable=False)
    quantity = Column(Integer, nullable=False)
    unit_price = Column(Float, nullable=False)
    total_price = Column(Float, nullable=False)
