from sqlalchemy import Column, DateTime, Float, Integer, String
from sqlalchemy.sql import func

from shared.config.database import Base


class Payment(Base):
    __tablename__ = "payments"

    id = Column(Integer, primary_key=True, index=True)
    purpose = Column(String(30), nullable=False) # workshop_booking, experience_booking, order
    reference_id = Column(Integer, nullable=True, index=True)
    amount = Column(Float, nullable=False)
    currency = Column(String(3), default="INR", nullable=False)
    gateway_order_id = Column(String(64), unique=True, nullable=False, index=True)
    gateway_payment_id = Column(String(64), nullable=True)
    status = Column(String(20), default="created", nullable=False) # created, paid, failed
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
