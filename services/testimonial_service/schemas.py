from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class TestimonialCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    video_url: str = Field(..., min_length=1, max_length=500)
    thumbnail_url: Optional[str] = Field(None, max_length=500)
    customer_name: Optional[str] = Field(None, max_length=255)
    experience_type: Optional[str] = Field(None, max_length=50)
    duration_seconds: Optional[int] = Field(None, ge=0)
    is_approved: bool = False
    is_featured: bool = False


class TestimonialFlags(BaseModel):
    is_approved: Optional[bool] = None
    is_featured: Optional[bool] = None


class TestimonialResponse(BaseModel):
    id: int
    title: str
    description: Optional[str]
    video_url: str
    thumbnail_url: Optional[str]
    customer_name: Optional[str]
    experience_type: Optional[str]
    is_approved: bool
    is_featured: bool
    duration_seconds: Optional[int]
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
