from datetime import datetime, timezone
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
import structlog

from services.notification_service.service import NotificationService
from shared.errors import NotFound, ValidationFailed
from shared.lifecycle import CUSTOM_ORDER_STATUS
from shared.security import CurrentUser

from .models import CustomOrderRequest
from .repository import CustomOrderRepository
from .schemas import CustomOrderCounts, CustomOrderCreate, CustomOrderUpdate, EmailRecord

logger = structlog.get_logger(__name__)


class CustomOrderService:
    @staticmethod
    async def submit(db: AsyncSession, data: CustomOrderCreate, user: Optional[CurrentUser] = None) -> CustomOrderRequest:
        request = await CustomOrderRepository.create(
            db,
            CustomOrderRequest(
                user_id=user.id if user else None,
                name=data.name.strip(),
                email=data.email,
                phone=data.phone,
                preferred_size=data.preferred_size,
                usage_description=data.usage_description.strip(),
                notes=data.notes,
                shipping_address=data.shipping_address,
                reference_images=[url for url in data.reference_images if url.strip()],
                status=CUSTOM_ORDER_STATUS.initial,
                emails_sent=[],
            ),
        )
        logger.info("custom_order_submitted", request_id=request.id, images=len(request.reference_images))

        summary = request.usage_description
        if len(summary) > 80:
            summary = summary[:80] + "..."
        try:
            await NotificationService.notify(
                db,
                type="custom_order",
                title="New Custom Order Request",
                message=f"{request.name} ({request.email}) requested a custom piece: {summary}",
            )
        except SQLAlchemyError as e:
            await db.rollback()
            logger.error("admin_notification_failed", type="custom_order", error=str(e))
        return request

    @staticmethod
    async def get(db: AsyncSession, request_id: int) -> CustomOrderRequest:
        request = await CustomOrderRepository.get(db, request_id)
        if not request:
            raise NotFound("Custom order request not found")
        return request

    @staticmethod
    async def list_requests(
        db: AsyncSession, status: Optional[str] = None, search: Optional[str] = None
    ) -> list[CustomOrderRequest]:
        if status == "all":
            status = None
        if status and not CUSTOM_ORDER_STATUS.knows(status):
            raise ValidationFailed(f"Unknown custom order status '{status}'")
        return await CustomOrderRepository.list_requests(db, status, (search or "").strip() or None)

    @staticmethod
    async def update(db: AsyncSession, request_id: int, data: CustomOrderUpdate) -> CustomOrderRequest:
        request = await CustomOrderService.get(db, request_id)
        changes = data.model_dump(exclude_unset=True)

        target = changes.pop("status", None)
        if target and target != request.status:
            CUSTOM_ORDER_STATUS.validate(request.status, target)
            request.status = target
        for field, value in changes.items():
            setattr(request, field, value)

        request = await CustomOrderRepository.save(db, request)
        logger.info("custom_order_updated", request_id=request_id, status=request.status)
        return request

    @staticmethod
    async def delete(db: AsyncSession, request_id: int) -> None:
        request = await CustomOrderService.get(db, request_id)
        await CustomOrderRepository.delete(db, request)
        logger.info("custom_order_deleted", request_id=request_id)

    @staticmethod
    async def remove_image(db: AsyncSession, request_id: int, image_url: str) -> CustomOrderRequest:
        request = await CustomOrderService.get(db, request_id)
        images = list(request.reference_images or [])
        if image_url not in images:
            raise NotFound("Image not found")
        images.remove(image_url)
        request.reference_images = images
        return await CustomOrderRepository.save(db, request)

    @staticmethod
    async def record_email(db: AsyncSession, request_id: int, data: EmailRecord) -> CustomOrderRequest:
        request = await CustomOrderService.get(db, request_id)
        if data.type == "payment_request" and not request.estimated_price:
            raise ValidationFailed("Please set an estimated price before sending payment request")
        if data.type == "custom" and not (data.message or "").strip():
            raise ValidationFailed("Please enter a custom message")

        sent = list(request.emails_sent or [])
        sent.append({"type": data.type, "sent_at": datetime.now(timezone.utc).isoformat()})
        request.emails_sent = sent
        request = await CustomOrderRepository.save(db, request)
        logger.info("custom_order_email_recorded", request_id=request_id, type=data.type)
        return request

    @staticmethod
    async def counts(db: AsyncSession) -> CustomOrderCounts:
        by_status = await CustomOrderRepository.count_by_status(db)
        return CustomOrderCounts(
            pending=by_status.get("pending", 0) + by_status.get("under_review", 0),
            in_progress=by_status.get("in_progress", 0) + by_status.get("payment_done", 0),
            delivered=by_status.get("delivered", 0),
        )
