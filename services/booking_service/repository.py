from datetime import date
from typing import Optional

from sqlalchemy import or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from .models import ExperienceBooking, WorkshopBooking


class BookingRepository:
    @staticmethod
    async def add(db: AsyncSession, booking):
        """Stages a booking row; the calling service owns the commit."""
        db.add(booking)
        await db.flush()
        return booking

    @staticmethod
    async def get_workshop_booking(db: AsyncSession, booking_id: int) -> Optional[WorkshopBooking]:
        result = await db.execute(select(WorkshopBooking).where(WorkshopBooking.id == booking_id))
        return result.scalars().first()

    @staticmethod
    async def get_workshop_booking_for_update(db: AsyncSession, booking_id: int) -> Optional[WorkshopBooking]:
        """Row-locks the booking and reloads it, so a stale copy in the session is replaced."""
        result = await db.execute(
            select(WorkshopBooking)
            .where(WorkshopBooking.id == booking_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        return result.scalars().first()

    @staticmethod
    async def get_experience_booking(db: AsyncSession, booking_id: int) -> Optional[ExperienceBooking]:
        result = await db.execute(select(ExperienceBooking).where(ExperienceBooking.id == booking_id))
        return result.scalars().first()

    @staticmethod
    async def list_for_workshop(db: AsyncSession, workshop_id: int) -> list[WorkshopBooking]:
        result = await db.execute(
            select(WorkshopBooking)
            .where(WorkshopBooking.workshop_id == workshop_id)
            .order_by(WorkshopBooking.booking_date, WorkshopBooking.time_slot, WorkshopBooking.id)
        )
        return list(result.scalars().all())

    @staticmethod
    async def list_experiences(
        db: AsyncSession, filter: str, today: date, search: Optional[str] = None, experience_types: tuple = ()
    ) -> list[ExperienceBooking]:
        stmt = select(ExperienceBooking).order_by(
            ExperienceBooking.booking_date.desc(), ExperienceBooking.id.desc()
        )
        if filter == "upcoming":
            stmt = stmt.where(
                ExperienceBooking.booking_status == "confirmed",
                ExperienceBooking.booking_date >= today,
            )
        elif filter == "completed":
            stmt = stmt.where(ExperienceBooking.booking_status == "completed")
        elif filter == "paid":
            stmt = stmt.where(ExperienceBooking.payment_status == "paid")
        elif filter == "pending":
            stmt = stmt.where(ExperienceBooking.payment_status == "pending")

        if search:
            conditions = [ExperienceBooking.time_slot.ilike(f"%{search}%")]
            if experience_types:
                conditions.append(ExperienceBooking.experience_type.in_(experience_types))
            stmt = stmt.where(or_(*conditions))

        result = await db.execute(stmt)
        return list(result.scalars().all())

    @staticmethod
    async def complete_past_experiences(db: AsyncSession, today: date) -> int:
        result = await db.execute(
            update(ExperienceBooking)
            .where(
                ExperienceBooking.booking_status == "confirmed",
                ExperienceBooking.booking_date < today,
            )
            .values(booking_status="completed")
        )
        await db.commit()
        return result.rowcount

    @staticmethod
    async def list_for_user(db: AsyncSession, user_id: int) -> tuple[list[WorkshopBooking], list[ExperienceBooking]]:
        workshops = await db.execute(
            select(WorkshopBooking)
            .where(WorkshopBooking.user_id == user_id)
            .order_by(WorkshopBooking.created_at.desc(), WorkshopBooking.id.desc())
        )
        experiences = await db.execute(
            select(ExperienceBooking)
            .where(ExperienceBooking.user_id == user_id)
            .order_by(ExperienceBooking.created_at.desc(), ExperienceBooking.id.desc())
        )
        return list(workshops.scalars().all()), list(experiences.scalars().all())

    @staticmethod
    async def save(db: AsyncSession, booking):
        await db.commit()
        await db.refresh(booking)
        return booking

    @staticmethod
    async def delete(db: AsyncSession, booking) -> None:
        await db.delete(booking)
        await db.commit()
