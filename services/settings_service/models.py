from sqlalchemy import Column, DateTime, Integer, String
from sqlalchemy.sql import func

from shared.config.database import Base


class BusinessSettings(Base):
    """Seller identity printed on invoices. The table holds a single row."""
    __tablename__ = "business_settings"

    id = Column(Integer, primary_key=True)
    gstin = Column(String(15), nullable=True)
    legal_name = Column(String(255), nullable=False)
    trade_name = Column(String(255), nullable=True)
    address_line1 = Column(String(255), nullable=False)
    address_line2 = Column(String(255), nullable=True)
    city = Column(String(100), nullable=False)
    state = Column(String(100), nullable=False)
    state_code = Column(String(2), nullable=False)
    pincode = Column(String(10), nullable=False)
    phone = Column(String(20), nullable=True)
    email = Column(String(255), nullable=True)
    pan = Column(String(10), nullable=True)
    bank_name = Column(String(255), nullable=True)
    bank_account_number = Column(String(34), nullable=True)
    bank_ifsc = Column(String(11), nullable=True)
    bank_branch = Column(String(255), nullable=True)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
