from typing import Optional

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from .models import CustomOrderRequest


class CustomOrderRepository:
    @staticmethod
    async def create(db: AsyncSession, request: CustomOrderRequest) -> CustomOrderRequest:
        db.add(request)
        await db.commit()
        await db.refresh(request)
        return request

    @staticmethod
    async def get(db: AsyncSession, request_id: int) -> Optional[CustomOrderRequest]:
        result = await db.execute(select(CustomOrderRequest).where(CustomOrderRequest.id == request_id))
        return result.scalars().first()

    @staticmethod
    async def list_requests(
        db: AsyncSession, status: Optional[str] = None, search: Optional[str] = None
    ) -> list[CustomOrderRequest]:
        stmt = select(CustomOrderRequest).order_by(
            CustomOrderRequest.created_at.desc(), CustomOrderRequest.id.desc()
        )
        if status:
            stmt = stmt.where(CustomOrderRequest.status == status)
        if search:
            pattern = f"%{search}%"
            stmt = stmt.where(
                or_(
                    CustomOrderRequest.name.ilike(pattern),
                    CustomOrderRequest.email.ilike(pattern),
                    CustomOrderRequest.usage_description.ilike(pattern),
                )
            )
        result = await db.execute(stmt)
        return list(result.scalars().all())

    @staticmethod
    async def count_by_status(db: AsyncSession) -> dict[str, int]:
        result = await db.execute(
            select(CustomOrderRequest.status, func.count()).group_by(CustomOrderRequest.status)
        )
        return {status: count for status, count in result.all()}

    @staticmethod
    async def save(db: AsyncSession, request: CustomOrderRequest) -> CustomOrderRequest:
        await db.commit()
        await db.refresh(request)
        return request

    @staticmethod
    async def delete(db: AsyncSession, request: CustomOrderRequest) -> None:
        await db.delete(request)
        await db.commit()
