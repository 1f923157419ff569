import asyncio
from datetime import date, datetime, timezone

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
import structlog

from services.order_service.models import Order
from services.order_service.repository import OrderRepository
from services.settings_service.repository import SettingsRepository
from shared.config.settings import ASSETS_DIR, INVOICE_NUMBER_RETRIES
from shared.errors import ConfigurationError, Conflict, NotFound, ValidationFailed
from shared.observability import studio_invoices_generated_total

from .pdf import find_logo, render_invoice
from .schemas import InvoiceResult
from .storage import InvoiceStore

logger = structlog.get_logger(__name__)


def invoice_number_for(year: int, last_sequence: int) -> str:
    return f"INV-{year}-{last_sequence + 1:04d}"


def _result(order: Order, created: bool) -> InvoiceResult:
    return InvoiceResult(
        order_id=order.id,
        invoice_number=order.invoice_number,
        invoice_url=order.invoice_url,
        invoice_generated_at=order.invoice_generated_at,
        created=created,
    )


async def _get_order(db: AsyncSession, order_id: int) -> Order:
    order = await OrderRepository.get_order(db, order_id)
    if not order:
        raise NotFound("Order not found")
    return order


class InvoiceService:
    @staticmethod
    async def _allocate_number(db: AsyncSession, order_id: int, year: int) -> Order:
        """
        Give the order the number after the highest one issued this year.
        Two generators racing for the same number collide on the unique
        constraint and the loser retries with a fresh read.
        """
        for attempt in range(1, INVOICE_NUMBER_RETRIES + 1):
            order = await _get_order(db, order_id)
            if order.invoice_number:
                return order
            order.invoice_number = invoice_number_for(year, await OrderRepository.last_invoice_sequence(db, year))
            try:
                await db.commit()
                return order
            except IntegrityError:
                await db.rollback()
                logger.warning("invoice_number_taken", order_id=order_id, attempt=attempt)
        raise Conflict("Could not allocate an invoice number, please retry")

    @staticmethod
    async def generate_invoice(db: AsyncSession, store: InvoiceStore, order_id: int) -> InvoiceResult:
        order = await _get_order(db, order_id)
        if order.invoice_url and order.invoice_number:
            return _result(order, created=False)

        if not await SettingsRepository.get(db):
            raise ConfigurationError("Business settings not configured")

        issued_on = date.today()
        order = await InvoiceService._allocate_number(db, order_id, issued_on.year)
        # A retried allocation rolls back, which expires anything loaded before it
        business = await SettingsRepository.get(db)
        pdf = await asyncio.to_thread(
            render_invoice,
            order,
            list(order.items),
            business,
            order.invoice_number,
            issued_on,
            find_logo(ASSETS_DIR),
        )
        order.invoice_url = await store.save(f"{order.invoice_number}.pdf", pdf)
        order.invoice_generated_at = datetime.now(timezone.utc)
        order = await OrderRepository.save(db, order)

        studio_invoices_generated_total.inc()
        logger.info("invoice_generated", order_id=order.id, invoice_number=order.invoice_number, size=len(pdf))
        return _result(order, created=True)

    @staticmethod
    async def request_gst_invoice(db: AsyncSession, store: InvoiceStore, order_id: int) -> InvoiceResult:
        """Back-office entry point: only orders billed to a GSTIN get an invoice on demand."""
        order = await _get_order(db, order_id)
        if not order.buyer_gstin:
            raise ValidationFailed("This order does not have GST details")
        return await InvoiceService.generate_invoice(db, store, order_id)
