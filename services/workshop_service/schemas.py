from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, Field


class SlotInput(BaseModel):
    time: str = Field(min_length=1)
    max_spots: int = Field(ge=1)
    booked: int = Field(default=0, ge=0)


class DateSlotsInput(BaseModel):
    date: date
    slots: List[SlotInput] = Field(min_length=1)


class WorkshopCreate(BaseModel):
    title: str = Field(min_length=3, max_length=100)
    price: float = Field(ge=0, le=1_000_000)
    tagline: Optional[str] = None
    description: Optional[str] = None
    duration: Optional[str] = None
    duration_days: int = Field(default=1, ge=1)
    location: Optional[str] = None
    maps_link: Optional[str] = None
    details: List[str] = []
    workshop_type: Optional[str] = None
    image_url: Optional[str] = None
    is_active: bool = True
    date_slots: List[DateSlotsInput] = []


class WorkshopUpdate(WorkshopCreate):
    pass


class TimeSlotView(BaseModel):
    time: str
    max_spots: int
    booked: int
    available: int
    is_full: bool
    max_guests: int


class DateSlotsView(BaseModel):
    date: str
    slots: List[TimeSlotView]


class WorkshopResponse(BaseModel):
    id: int
    title: str
    tagline: Optional[str]
    description: Optional[str]
    price: float
    duration: Optional[str]
    duration_days: int
    location: Optional[str]
    maps_link: Optional[str]
    details: List[str]
    workshop_date: Optional[date]
    max_participants: int
    current_participants: int
    workshop_type: Optional[str]
    image_url: Optional[str]
    is_active: bool
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class WorkshopDetail(WorkshopResponse):
    date_slots: List[DateSlotsView]
    total_booked: int
    total_max_spots: int


class CalendarWorkshop(BaseModel):
    id: int
    title: str
    location: Optional[str]
    is_active: bool
    price: float
    booked: int
    max_spots: int


class CalendarDay(BaseModel):
    date: date
    workshops: List[CalendarWorkshop]
    total_bookings: int
