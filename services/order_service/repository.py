from typing import Optional

from sqlalchemy import delete, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from .models import Order, OrderItem


class OrderRepository:
    @staticmethod
    async def add(db: AsyncSession, order: Order) -> Order:
        """Stages the order with its items; the calling service owns the commit."""
        db.add(order)
        await db.flush()
        return order

    @staticmethod
    async def get_order(db: AsyncSession, order_id: int) -> Optional[Order]:
        result = await db.execute(select(Order).where(Order.id == order_id))
        return result.scalars().first()

    @staticmethod
    async def get_by_number_for_update(db: AsyncSession, order_number: str) -> Optional[Order]:
        result = await db.execute(
            select(Order)
            .where(Order.order_number == order_number)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        return result.scalars().first()

    @staticmethod
    async def list_orders(
        db: AsyncSession,
        order_status: Optional[str] = None,
        payment_status: Optional[str] = None,
        search: Optional[str] = None,
    ) -> list[Order]:
        stmt = select(Order).order_by(Order.created_at.desc(), Order.id.desc())
        if order_status:
            stmt = stmt.where(Order.order_status == order_status)
        if payment_status:
            stmt = stmt.where(Order.payment_status == payment_status)
        if search:
            pattern = f"%{search}%"
            stmt = stmt.where(
                or_(
                    Order.order_number.ilike(pattern),
                    Order.customer_name.ilike(pattern),
                    Order.customer_email.ilike(pattern),
                )
            )
        result = await db.execute(stmt)
        return list(result.scalars().all())

    @staticmethod
    async def list_for_user(db: AsyncSession, user_id: int) -> list[Order]:
        result = await db.execute(
            select(Order).where(Order.user_id == user_id).order_by(Order.created_at.desc(), Order.id.desc())
        )
        return list(result.scalars().all())

    @staticmethod
    async def last_invoice_sequence(db: AsyncSession, year: int) -> int:
        """Highest sequence issued for the year, 0 if none. Numbers past 9999 sort by length first."""
        result = await db.execute(
            select(Order.invoice_number)
            .where(Order.invoice_number.like(f"INV-{year}-%"))
            .order_by(func.length(Order.invoice_number).desc(), Order.invoice_number.desc())
            .limit(1)
        )
        last = result.scalar_one_or_none()
        return int(last.rsplit("-", 1)[1]) if last else 0

    @staticmethod
    async def save(db: AsyncSession, order: Order) -> Order:
        await db.commit()
        await db.refresh(order)
        return order

    @staticmethod
    async def delete_order(db: AsyncSession, order_id: int) -> None:
        # Items first, then the order itself
        await db.execute(delete(OrderItem).where(OrderItem.order_id == order_id))
        await db.execute(delete(Order).where(Order.id == order_id))
        await db.commit()
