from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class BusinessSettingsUpdate(BaseModel):
    gstin: Optional[str] = Field(None, max_length=15)
    legal_name: str = Field(..., min_length=1, max_length=255)
    trade_name: Optional[str] = None
    address_line1: str = Field(..., min_length=1)
    address_line2: Optional[str] = None
    city: str = Field(..., min_length=1)
    state_code: str = Field(..., pattern=r"^\d{2}$")
    pincode: str = Field(..., pattern=r"^\d{6}$")
    phone: Optional[str] = None
    email: Optional[str] = None
    pan: Optional[str] = Field(None, max_length=10)
    bank_name: Optional[str] = None
    bank_account_number: Optional[str] = None
    bank_ifsc: Optional[str] = Field(None, max_length=11)
    bank_branch: Optional[str] = None


class BusinessSettingsResponse(BaseModel):
    gstin: Optional[str]
    legal_name: str
    trade_name: Optional[str]
    address_line1: str
    address_line2: Optional[str]
    city: str
    state: str
    state_code: str
    pincode: str
    phone: Optional[str]
    email: Optional[str]
    pan: Optional[str]
    bank_name: Optional[str]
    bank_account_number: Optional[str]
    bank_ifsc: Optional[str]
    bank_branch: Optional[str]
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class StateOption(BaseModel):
    code: str
    name: str
