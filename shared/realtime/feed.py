import asyncio
from contextlib import asynccontextmanager
from typing import AsyncIterator

import structlog

from shared.observability import studio_realtime_subscribers

logger = structlog.get_logger(__name__)


class ChangeFeed:
    """
    In-process publish/subscribe of row changes, keyed by topic.

    Each subscriber owns a bounded queue. A subscriber that falls behind
    loses its oldest pending event rather than blocking publishers.
    """

    def __init__(self, max_pending: int = 100):
        self.max_pending = max_pending
        self._subscribers: dict[str, set[asyncio.Queue]] = {}

    def subscriber_count(self, topic: str) -> int:
        return len(self._subscribers.get(topic, ()))

    def publish(self, topic: str, event: dict) -> int:
        queues = self._subscribers.get(topic, set())
        for queue in queues:
            if queue.full():
                queue.get_nowait()
                logger.warning("feed_subscriber_lagging", topic=topic)
            queue.put_nowait(event)
        return len(queues)

    @asynccontextmanager
    async def subscribe(self, topic: str) -> AsyncIterator[asyncio.Queue]:
        queue: asyncio.Queue = asyncio.Queue(maxsize=self.max_pending)
        self._subscribers.setdefault(topic, set()).add(queue)
        studio_realtime_subscribers.inc()
        try:
            yield queue
        finally:
            subscribers = self._subscribers.get(topic)
            if subscribers is not None:
                subscribers.discard(queue)
                if not subscribers:
                    del self._subscribers[topic]
            studio_realtime_subscribers.dec()


# Process-wide feed shared by every mounted service
change_feed = ChangeFeed()

ADMIN_NOTIFICATIONS_TOPIC = "admin_notifications"


def workshop_topic(workshop_id: int) -> str:
    return f"workshop:{workshop_id}"
