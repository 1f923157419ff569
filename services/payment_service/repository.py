from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from .models import Payment


class PaymentRepository:
    @staticmethod
    async def add(db: AsyncSession, payment: Payment) -> Payment:
        """Stages the row; the calling service owns the commit."""
        db.add(payment)
        await db.flush()
        return payment

    @staticmethod
    async def get_by_gateway_order(db: AsyncSession, gateway_order_id: str) -> Optional[Payment]:
        result = await db.execute(
            select(Payment).where(Payment.gateway_order_id == gateway_order_id)
        )
        return result.scalars().first()
