from sqlalchemy import Column, Date, DateTime, Float, ForeignKey, Integer, String, Text
from sqlalchemy.sql import func

from shared.config.database import Base


class WorkshopBooking(Base):
    __tablename__ = "workshop_bookings"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, nullable=False, index=True)
    workshop_id = Column(Integer, ForeignKey("workshops.id", ondelete="CASCADE"), nullable=False, index=True)
    booking_date = Column(Date, nullable=False)
    time_slot = Column(String(50), nullable=False)
    guests = Column(Integer, nullable=False)
    total_amount = Column(Float, nullable=False) # price * guests, computed server-side
    customer_name = Column(String(255), nullable=False)
    customer_email = Column(String(255), nullable=False)
    customer_phone = Column(String(20), nullable=False)
    payment_status = Column(String(20), default="pending", nullable=False) # pending, paid, failed, refund_due
    booking_status = Column(String(20), default="pending", nullable=False) # pending, confirmed, completed, cancelled
    razorpay_order_id = Column(String(64), nullable=True, index=True)
    razorpay_payment_id = Column(String(64), nullable=True)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())


class ExperienceBooking(Base):
    __tablename__ = "experience_bookings"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, nullable=False, index=True)
    experience_type = Column(String(30), nullable=False) # couple, birthday, farm, studio
    booking_date = Column(Date, nullable=False)
    time_slot = Column(String(50), nullable=False)
    guests = Column(Integer, nullable=False)
    total_amount = Column(Float, nullable=False)
    customer_name = Column(String(255), nullable=False)
    customer_email = Column(String(255), nullable=False)
    customer_phone = Column(String(20), nullable=False)
    payment_status = Column(String(20), default="pending", nullable=False)
    booking_status = Column(String(20), default="pending", nullable=False)
    razorpay_order_id = Column(String(64), nullable=True, index=True)
    razorpay_payment_id = Column(String(64), nullable=True)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
