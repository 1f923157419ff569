from sqlalchemy import JSON, Column, Date, DateTime, Float, Integer, String, Text
from sqlalchemy.sql import func

from shared.config.database import Base


class CustomOrderRequest(Base):
    __tablename__ = "custom_order_requests"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, nullable=True, index=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False)
    phone = Column(String(20), nullable=True)
    preferred_size = Column(String(255), nullable=True)
    usage_description = Column(Text, nullable=False)
    notes = Column(Text, nullable=True)
    shipping_address = Column(Text, nullable=True)
    reference_images = Column(JSON, default=list, nullable=False) # list of image URLs
    status = Column(String(20), default="pending", nullable=False, index=True)
    admin_notes = Column(Text, nullable=True)
    estimated_price = Column(Float, nullable=True)
    estimated_delivery_date = Column(Date, nullable=True)
    emails_sent = Column(JSON, default=list, nullable=False) # [{"type", "sent_at"}]
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
