from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from .models import Workshop


class WorkshopRepository:

    @staticmethod
    async def create(db: AsyncSession, workshop: Workshop) -> Workshop:
        db.add(workshop)
        await db.commit()
        await db.refresh(workshop)
        return workshop

    @staticmethod
    async def get(db: AsyncSession, workshop_id: int) -> Optional[Workshop]:
        result = await db.execute(select(Workshop).where(Workshop.id == workshop_id))
        return result.scalars().first()

    @staticmethod
    async def get_for_update(db: AsyncSession, workshop_id: int) -> Optional[Workshop]:
        """Row-locks the workshop (FOR UPDATE) until the caller commits."""
        result = await db.execute(
            select(Workshop).where(Workshop.id == workshop_id).with_for_update()
        )
        return result.scalars().first()

    @staticmethod
    async def list_all(db: AsyncSession, active_only: bool = False) -> list[Workshop]:
        stmt = select(Workshop).order_by(Workshop.created_at.desc(), Workshop.id.desc())
        if active_only:
            stmt = stmt.where(Workshop.is_active.is_(True))
        result = await db.execute(stmt)
        return list(result.scalars().all())

    @staticmethod
    async def save(db: AsyncSession, workshop: Workshop) -> Workshop:
        db.add(workshop)
        await db.commit()
        await db.refresh(workshop)
        return workshop

    @staticmethod
    async def delete(db: AsyncSession, workshop: Workshop) -> None:
        await db.delete(workshop)
        await db.commit()
