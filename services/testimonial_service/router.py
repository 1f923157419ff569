from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from shared.config.database import get_db
from shared.security import require_admin

from .schemas import TestimonialCreate, TestimonialFlags, TestimonialResponse
from .service import TestimonialService

router = APIRouter(prefix="/admin", dependencies=[Depends(require_admin)])
public_router = APIRouter()

@public_router.get("/health", include_in_schema=False)
async def health_check():
    return {"service": "testimonial", "status": "running"}


@public_router.get("/", response_model=list[TestimonialResponse])
async def approved_testimonials(db: AsyncSession = Depends(get_db)):
    return await TestimonialService.public_list(db)


@router.get("/", response_model=list[TestimonialResponse])
async def all_testimonials(db: AsyncSession = Depends(get_db)):
    return await TestimonialService.admin_list(db)


@router.post("/", response_model=TestimonialResponse, status_code=status.HTTP_201_CREATED)
async def create_testimonial(payload: TestimonialCreate, db: AsyncSession = Depends(get_db)):
    return await TestimonialService.create(db, payload)


@router.patch("/{testimonial_id}", response_model=TestimonialResponse)
async def update_flags(testimonial_id: int, payload: TestimonialFlags, db: AsyncSession = Depends(get_db)):
    return await TestimonialService.set_flags(db, testimonial_id, payload)


@router.delete("/{testimonial_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_testimonial(testimonial_id: int, db: AsyncSession = Depends(get_db)):
    await TestimonialService.delete(db, testimonial_id)
