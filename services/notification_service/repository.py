from typing import Optional

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from .models import AdminNotification


class NotificationRepository:
    @staticmethod
    async def create(db: AsyncSession, notification: AdminNotification) -> AdminNotification:
        db.add(notification)
        await db.commit()
        await db.refresh(notification)
        return notification

    @staticmethod
    async def get(db: AsyncSession, notification_id: int) -> Optional[AdminNotification]:
        result = await db.execute(
            select(AdminNotification).where(AdminNotification.id == notification_id)
        )
        return result.scalars().first()

    @staticmethod
    async def latest(db: AsyncSession, limit: int) -> list[AdminNotification]:
        result = await db.execute(
            select(AdminNotification)
            .order_by(AdminNotification.created_at.desc(), AdminNotification.id.desc())
            .limit(limit)
        )
        return list(result.scalars().all())

    @staticmethod
    async def unread_count(db: AsyncSession) -> int:
        result = await db.execute(
            select(func.count()).select_from(AdminNotification).where(AdminNotification.is_read.is_(False))
        )
        return result.scalar_one()

    @staticmethod
    async def mark_all_read(db: AsyncSession) -> int:
        result = await db.execute(
            update(AdminNotification)
            .where(AdminNotification.is_read.is_(False))
            .values(is_read=True)
        )
        await db.commit()
        return result.rowcount

    @staticmethod
    async def save(db: AsyncSession, notification: AdminNotification) -> AdminNotification:
        await db.commit()
        await db.refresh(notification)
        return notification

    @staticmethod
    async def delete(db: AsyncSession, notification: AdminNotification) -> None:
        await db.delete(notification)
        await db.commit()
