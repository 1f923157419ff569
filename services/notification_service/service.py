from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession
import structlog

from shared.errors import NotFound
from shared.realtime import ADMIN_NOTIFICATIONS_TOPIC, change_feed

from .models import AdminNotification
from .repository import NotificationRepository
from .schemas import NotificationFeed, NotificationResponse

logger = structlog.get_logger(__name__)

FEED_LIMIT = 30


class NotificationService:
    @staticmethod
    async def notify(
        db: AsyncSession,
        type: str,
        title: str,
        message: str,
        order_id: Optional[int] = None,
    ) -> AdminNotification:
        """Store an admin notification and push it to subscribed admin sockets."""
        notification = await NotificationRepository.create(
            db,
            AdminNotification(type=type, title=title, message=message, order_id=order_id),
        )
        delivered = change_feed.publish(
            ADMIN_NOTIFICATIONS_TOPIC,
            NotificationResponse.model_validate(notification).model_dump(mode="json"),
        )
        logger.info(
            "admin_notification_created",
            notification_id=notification.id,
            type=type,
            subscribers=delivered,
        )
        return notification

    @staticmethod
    async def feed(db: AsyncSession) -> NotificationFeed:
        notifications = await NotificationRepository.latest(db, FEED_LIMIT)
        return NotificationFeed(
            notifications=[NotificationResponse.model_validate(n) for n in notifications],
            unread_count=await NotificationRepository.unread_count(db),
        )

    @staticmethod
    async def mark_read(db: AsyncSession, notification_id: int) -> AdminNotification:
        notification = await NotificationRepository.get(db, notification_id)
        if not notification:
            raise NotFound("Notification not found")
        notification.is_read = True
        return await NotificationRepository.save(db, notification)

    @staticmethod
    async def mark_all_read(db: AsyncSession) -> int:
        return await NotificationRepository.mark_all_read(db)

    @staticmethod
    async def delete(db: AsyncSession, notification_id: int) -> None:
        notification = await NotificationRepository.get(db, notification_id)
        if not notification:
            raise NotFound("Notification not found")
        await NotificationRepository.delete(db, notification)
