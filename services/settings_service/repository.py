from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from .models import BusinessSettings


class SettingsRepository:
    @staticmethod
    async def get(db: AsyncSession) -> Optional[BusinessSettings]:
        result = await db.execute(select(BusinessSettings).order_by(BusinessSettings.id).limit(1))
        return result.scalars().first()

    @staticmethod
    async def save(db: AsyncSession, settings: BusinessSettings) -> BusinessSettings:
        db.add(settings)
        await db.commit()
        await db.refresh(settings)
        return settings
