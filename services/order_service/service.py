import secrets
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
import structlog

from services.notification_service.service import NotificationService
from services.payment_service.gateway import PaymentGateway
from services.payment_service.service import PaymentService
from services.product_service.repository import ProductRepository
from shared.config.settings import SELLER_STATE_CODE
from shared.errors import NotFound, ValidationFailed
from shared.gst import get_state_by_code, validate_gstin
from shared.lifecycle import ORDER_STATUS
from shared.security import CurrentUser

from .models import Order, OrderItem
from .pricing import price_order
from .repository import OrderRepository
from .schemas import CheckoutRequest, OrderCheckout, OrderVerify

logger = structlog.get_logger(__name__)

PAYMENT_STATUSES = ("pending", "paid", "failed")


def new_order_number() -> str:
    stamp = datetime.now(timezone.utc).strftime("%Y%m%d")
    return f"ORD-{stamp}-{secrets.token_hex(3).upper()}"


def resolve_buyer_state(gstin: Optional[str], state_code: Optional[str]) -> tuple[Optional[str], str]:
    """
    Returns (normalized gstin, buyer state code). A GSTIN fixes the state;
    without either, the sale is treated as intra-state.
    """
    if gstin and gstin.strip():
        code = validate_gstin(gstin)
        return gstin.strip().upper(), code
    if state_code:
        if get_state_by_code(state_code) is None:
            raise ValidationFailed("Unknown state code")
        return None, state_code
    return None, SELLER_STATE_CODE


class OrderService:
    @staticmethod
    async def checkout(
        db: AsyncSession, gateway: PaymentGateway, user: CurrentUser, data: CheckoutRequest
    ) -> OrderCheckout:
        gstin, buyer_state_code = resolve_buyer_state(data.buyer_gstin, data.buyer_state_code)

        products = await ProductRepository.get_products_by_ids(db, [i.product_id for i in data.items])
        items = []
        for line in data.items:
            product = products.get(line.product_id)
            if product is None:
                raise NotFound(f"Product {line.product_id} not found")
            if not product.in_stock:
                raise ValidationFailed(f"{product.name} is out of stock")
            items.append(
                OrderItem(
                    item_type="product",
                    item_id=product.id,
                    item_name=product.name,
                    quantity=line.quantity,
                    unit_price=product.price,
                    total_price=round(product.price * line.quantity, 2),
                )
            )

        pricing = price_order([i.total_price for i in items], buyer_state_code, SELLER_STATE_CODE)
        order_number = new_order_number()
        payment = await PaymentService.open_order(
            db,
            gateway,
            purpose="order",
            amount=pricing.total_amount,
            notes={
                "order_number": order_number,
                "customer_name": data.customer_name,
                "customer_email": data.customer_email,
            },
        )
        state = get_state_by_code(buyer_state_code)
        order = await OrderRepository.add(
            db,
            Order(
                order_number=order_number,
                user_id=user.id,
                customer_name=data.customer_name,
                customer_email=data.customer_email,
                customer_phone=data.customer_phone,
                shipping_address=data.shipping_address,
                subtotal=pricing.subtotal,
                shipping_cost=pricing.shipping_cost,
                taxable_amount=pricing.taxable_amount,
                cgst_amount=pricing.gst.cgst,
                sgst_amount=pricing.gst.sgst,
                igst_amount=pricing.gst.igst,
                total_amount=pricing.total_amount,
                buyer_gstin=gstin,
                buyer_state=state.name if state else None,
                buyer_state_code=buyer_state_code,
                payment_status="pending",
                order_status="pending",
                razorpay_order_id=payment.gateway_order_id,
                items=items,
            ),
        )
        payment.reference_id = order.id
        await db.commit()

        logger.info(
            "order_created",
            order_number=order_number,
            total=pricing.total_amount,
            intra_state=pricing.gst.is_intra_state,
            gst_invoice=gstin is not None,
        )
        return OrderCheckout(
            order_id=payment.gateway_order_id,
            amount=pricing.total_amount,
            currency=payment.currency,
            key_id=gateway.key_id,
            id=order.id,
            order_number=order_number,
            subtotal=pricing.subtotal,
            shipping_cost=pricing.shipping_cost,
            taxable_amount=pricing.taxable_amount,
            cgst_amount=pricing.gst.cgst,
            sgst_amount=pricing.gst.sgst,
            igst_amount=pricing.gst.igst,
        )

    @staticmethod
    async def verify_payment(
        db: AsyncSession, gateway: PaymentGateway, user: CurrentUser, data: OrderVerify
    ) -> Order:
        order = await OrderRepository.get_by_number_for_update(db, data.order_number)
        if order is None or order.user_id != user.id or order.razorpay_order_id != data.razorpay_order_id:
            raise NotFound("Order not found")

        await PaymentService.confirm(db, gateway, "order", data)
        if order.payment_status == "paid":
            return order

        order.payment_status = "paid"
        if order.order_status == ORDER_STATUS.initial:
            order.order_status = "confirmed"
        order.razorpay_payment_id = data.razorpay_payment_id
        order = await OrderRepository.save(db, order)
        logger.info("order_paid", order_number=order.order_number)

        try:
            await NotificationService.notify(
                db,
                type="order",
                title="New Order Received",
                message=(
                    f"Order #{order.order_number} from {order.customer_name} for ₹{order.total_amount:,.2f}"
                    f"{' (GST Invoice)' if order.buyer_gstin else ''}"
                ),
                order_id=order.id,
            )
        except SQLAlchemyError as e:
            await db.rollback()
            logger.error("admin_notification_failed", type="order", error=str(e))
        return order

    @staticmethod
    async def get_order(db: AsyncSession, order_id: int) -> Order:
        order = await OrderRepository.get_order(db, order_id)
        if not order:
            raise NotFound("Order not found")
        return order

    @staticmethod
    async def get_own_order(db: AsyncSession, user: CurrentUser, order_id: int) -> Order:
        order = await OrderRepository.get_order(db, order_id)
        if not order or order.user_id != user.id:
            raise NotFound("Order not found")
        return order

    @staticmethod
    async def list_orders(
        db: AsyncSession,
        order_status: Optional[str] = None,
        payment_status: Optional[str] = None,
        search: Optional[str] = None,
    ) -> list[Order]:
        if order_status and not ORDER_STATUS.knows(order_status):
            raise ValidationFailed(f"Unknown order status '{order_status}'")
        if payment_status and payment_status not in PAYMENT_STATUSES:
            raise ValidationFailed(f"Unknown payment status '{payment_status}'")
        return await OrderRepository.list_orders(db, order_status, payment_status, (search or "").strip() or None)

    @staticmethod
    async def my_orders(db: AsyncSession, user: CurrentUser) -> list[Order]:
        return await OrderRepository.list_for_user(db, user.id)

    @staticmethod
    async def update_status(db: AsyncSession, order_id: int, target: str) -> Order:
        order = await OrderService.get_order(db, order_id)
        ORDER_STATUS.validate(order.order_status, target)
        previous, order.order_status = order.order_status, target
        order = await OrderRepository.save(db, order)
        logger.info("order_status_updated", order_id=order_id, previous=previous, status=target)
        return order

    @staticmethod
    async def delete_order(db: AsyncSession, order_id: int) -> None:
        await OrderService.get_order(db, order_id)
        await OrderRepository.delete_order(db, order_id)
        logger.info("order_deleted", order_id=order_id)
