from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from .models import VideoTestimonial


class TestimonialRepository:
    @staticmethod
    async def create(db: AsyncSession, testimonial: VideoTestimonial) -> VideoTestimonial:
        db.add(testimonial)
        await db.commit()
        await db.refresh(testimonial)
        return testimonial

    @staticmethod
    async def get(db: AsyncSession, testimonial_id: int) -> Optional[VideoTestimonial]:
        result = await db.execute(select(VideoTestimonial).where(VideoTestimonial.id == testimonial_id))
        return result.scalars().first()

    @staticmethod
    async def list_all(db: AsyncSession, approved_only: bool = False) -> list[VideoTestimonial]:
        stmt = select(VideoTestimonial)
        if approved_only:
            stmt = stmt.where(VideoTestimonial.is_approved.is_(True)).order_by(
                VideoTestimonial.is_featured.desc(),
                VideoTestimonial.created_at.desc(),
                VideoTestimonial.id.desc(),
            )
        else:
            stmt = stmt.order_by(VideoTestimonial.created_at.desc(), VideoTestimonial.id.desc())
        result = await db.execute(stmt)
        return list(result.scalars().all())

    @staticmethod
    async def save(db: AsyncSession, testimonial: VideoTestimonial) -> VideoTestimonial:
        await db.commit()
        await db.refresh(testimonial)
        return testimonial

    @staticmethod
    async def delete(db: AsyncSession, testimonial: VideoTestimonial) -> None:
        await db.delete(testimonial)
        await db.commit()
