from sqlalchemy.ext.asyncio import AsyncSession
import structlog

from shared.errors import NotFound

from .models import VideoTestimonial
from .repository import TestimonialRepository
from .schemas import TestimonialCreate, TestimonialFlags

logger = structlog.get_logger(__name__)


class TestimonialService:
    @staticmethod
    async def public_list(db: AsyncSession) -> list[VideoTestimonial]:
        """Approved testimonials, featured ones first."""
        return await TestimonialRepository.list_all(db, approved_only=True)

    @staticmethod
    async def admin_list(db: AsyncSession) -> list[VideoTestimonial]:
        return await TestimonialRepository.list_all(db)

    @staticmethod
    async def create(db: AsyncSession, data: TestimonialCreate) -> VideoTestimonial:
        testimonial = await TestimonialRepository.create(db, VideoTestimonial(**data.model_dump()))
        logger.info("testimonial_created", testimonial_id=testimonial.id)
        return testimonial

    @staticmethod
    async def set_flags(db: AsyncSession, testimonial_id: int, data: TestimonialFlags) -> VideoTestimonial:
        testimonial = await TestimonialRepository.get(db, testimonial_id)
        if not testimonial:
            raise NotFound("Testimonial not found")
        for field, value in data.model_dump(exclude_none=True).items():
            setattr(testimonial, field, value)
        testimonial = await TestimonialRepository.save(db, testimonial)
        logger.info(
            "testimonial_flags_updated",
            testimonial_id=testimonial_id,
            approved=testimonial.is_approved,
            featured=testimonial.is_featured,
        )
        return testimonial

    @staticmethod
    async def delete(db: AsyncSession, testimonial_id: int) -> None:
        testimonial = await TestimonialRepository.get(db, testimonial_id)
        if not testimonial:
            raise NotFound("Testimonial not found")
        await TestimonialRepository.delete(db, testimonial)
