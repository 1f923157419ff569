from sqlalchemy import Boolean, Column, DateTime, Float, Integer, String, Text
from sqlalchemy.sql import func

from shared.config.database import Base

PRODUCT_HSN_CODE = "6912" # ceramic tableware and household articles


class Product(Base):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    price = Column(Float, nullable=False) # GST-inclusive
    category = Column(String(100), nullable=True, index=True)
    in_stock = Column(Boolean, default=True, nullable=False)
    weight_kg = Column(Float, nullable=True)
    hsn_code = Column(String(8), default=PRODUCT_HSN_CODE, nullable=False)
    image_url = Column(String(500), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
