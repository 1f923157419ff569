from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from .models import PRODUCT_HSN_CODE


class ProductCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    price: float = Field(..., gt=0)
    category: Optional[str] = Field(None, max_length=100)
    in_stock: bool = True
    weight_kg: Optional[float] = Field(None, ge=0)
    hsn_code: str = Field(PRODUCT_HSN_CODE, pattern=r"^\d{4,8}$")
    image_url: Optional[str] = None


class ProductResponse(BaseModel):
    id: int
    name: str
    description: Optional[str]
    price: float
    category: Optional[str]
    in_stock: bool
    weight_kg: Optional[float]
    hsn_code: str
    image_url: Optional[str]
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
