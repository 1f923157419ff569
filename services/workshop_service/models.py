from sqlalchemy import JSON, Boolean, Column, Date, DateTime, Float, Integer, String, Text
from sqlalchemy.sql import func

from shared.config.database import Base


class Workshop(Base):
    __tablename__ = "workshops"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(100), nullable=False)
    tagline = Column(String(255), nullable=True)
    description = Column(Text, nullable=True)
    price = Column(Float, nullable=False)
    duration = Column(String(50), nullable=True) # free text, e.g. "2 hours"
    duration_days = Column(Integer, default=1, nullable=False)
    location = Column(String(255), nullable=True)
    maps_link = Column(String(500), nullable=True)
    details = Column(JSON, default=list, nullable=False) # bullet points
    time_slots = Column(JSON, default=list, nullable=False) # flat [{date, time, max_spots, booked}]
    workshop_date = Column(Date, nullable=True) # first slot date
    max_participants = Column(Integer, default=0, nullable=False) # sum of max_spots
    current_participants = Column(Integer, default=0, nullable=False)
    workshop_type = Column(String(50), nullable=True, index=True)
    image_url = Column(String(500), nullable=True)
    is_active = Column(Boolean, default=True, nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
