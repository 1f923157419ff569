from sqlalchemy.ext.asyncio import AsyncSession
import structlog

from shared.errors import NotFound, PaymentVerificationFailed
from shared.observability import studio_payment_verifications_total

from .gateway import PaymentGateway, make_receipt
from .models import Payment
from .repository import PaymentRepository
from .schemas import PaymentVerify

logger = structlog.get_logger(__name__)

RECEIPT_PREFIXES = {
    "workshop_booking": "ws",
    "experience_booking": "exp",
    "order": "ord",
}


class PaymentService:
    @staticmethod
    async def open_order(
        db: AsyncSession,
        gateway: PaymentGateway,
        purpose: str,
        amount: float,
        notes: dict,
    ) -> Payment:
        """Create the gateway order and stage a payment row for it (no commit)."""
        receipt = make_receipt(RECEIPT_PREFIXES.get(purpose, "pay"))
        order = await gateway.create_order(amount, receipt, notes)
        payment = Payment(
            purpose=purpose,
            amount=amount,
            currency=order.get("currency", "INR"),
            gateway_order_id=order["id"],
            status="created",
        )
        return await PaymentRepository.add(db, payment)

    @staticmethod
    async def confirm(
        db: AsyncSession,
        gateway: PaymentGateway,
        purpose: str,
        data: PaymentVerify,
    ) -> Payment | None:
        """
        Check the checkout signature and mark the payment row paid.
        A bad signature marks the row failed, commits that, and raises.
        Returns None when no payment row exists for the gateway order.
        """
        payment = await PaymentRepository.get_by_gateway_order(db, data.razorpay_order_id)
        verified = gateway.verify_signature(
            data.razorpay_order_id, data.razorpay_payment_id, data.razorpay_signature
        )
        studio_payment_verifications_total.labels(
            purpose=purpose, result="verified" if verified else "rejected"
        ).inc()

        if not verified:
            logger.warning("payment_signature_rejected", gateway_order_id=data.razorpay_order_id)
            if payment is not None and payment.status != "paid":
                payment.status = "failed"
                await db.commit()
            raise PaymentVerificationFailed("Payment verification failed")

        if payment is not None:
            payment.status = "paid"
            payment.gateway_payment_id = data.razorpay_payment_id
            await db.flush()
        return payment

    @staticmethod
    async def get_by_gateway_order(db: AsyncSession, gateway_order_id: str) -> Payment:
        payment = await PaymentRepository.get_by_gateway_order(db, gateway_order_id)
        if not payment:
            raise NotFound("Payment not found")
        return payment
