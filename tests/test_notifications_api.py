import pytest
from fastapi.testclient import TestClient
from starlette.websockets import WebSocketDisconnect

from services.notification_service.main import notification_app
from services.notification_service.service import FEED_LIMIT, NotificationService
from shared.realtime import ADMIN_NOTIFICATIONS_TOPIC, change_feed

from conftest import ADMIN_ID, api_client, bearer


async def test_notify_stores_and_publishes(db):
    async with change_feed.subscribe(ADMIN_NOTIFICATIONS_TOPIC) as queue:
        notification = await NotificationService.notify(
            db, type="order", title="New Order Received", message="Order #ORD-1", order_id=7
        )
        event = queue.get_nowait()

    assert notification.id is not None
    assert notification.is_read is False
    assert event["id"] == notification.id
    assert event["order_id"] == 7
    assert event["title"] == "New Order Received"


async def test_feed_is_newest_first_and_capped(db, admin_headers):
    for n in range(FEED_LIMIT + 2):
        await NotificationService.notify(db, type="workshop", title=f"Booking {n}", message="...")

    async with api_client(notification_app) as client:
        resp = await client.get("/", headers=admin_headers)

    body = resp.json()
    assert len(body["notifications"]) == FEED_LIMIT
    assert body["notifications"][0]["title"] == f"Booking {FEED_LIMIT + 1}"
    assert body["unread_count"] == FEED_LIMIT + 2


async def test_mark_read_and_delete(db, admin_headers):
    first = await NotificationService.notify(db, type="experience", title="One", message="...")
    await NotificationService.notify(db, type="experience", title="Two", message="...")

    async with api_client(notification_app) as client:
        read = await client.patch(f"/{first.id}/read", headers=admin_headers)
        unread = (await client.get("/", headers=admin_headers)).json()["unread_count"]
        all_read = await client.patch("/read-all", headers=admin_headers)
        after = (await client.get("/", headers=admin_headers)).json()["unread_count"]
        deleted = await client.delete(f"/{first.id}", headers=admin_headers)
        missing = await client.patch(f"/{first.id}/read", headers=admin_headers)

    assert read.json()["is_read"] is True
    assert unread == 1
    assert all_read.json() == {"updated": 1}
    assert after == 0
    assert deleted.status_code == 204
    assert missing.status_code == 404
    assert missing.json() == {"error": "Notification not found"}


async def test_feed_is_admin_only(customer_headers):
    async with api_client(notification_app) as client:
        resp = await client.get("/", headers=customer_headers)

    assert resp.status_code == 403


def test_live_socket_rejects_non_admins():
    client = TestClient(notification_app)
    token = bearer(101)["Authorization"].split()[1]

    for url in ("/live", f"/live?token={token}"):
        with pytest.raises(WebSocketDisconnect) as exc:
            with client.websocket_connect(url):
                pass
        assert exc.value.code == 1008


def test_live_socket_unsubscribes_when_the_admin_leaves():
    client = TestClient(notification_app)
    token = bearer(ADMIN_ID, "admin")["Authorization"].split()[1]

    with client.websocket_connect(f"/live?token={token}"):
        assert change_feed.subscriber_count(ADMIN_NOTIFICATIONS_TOPIC) == 1

    assert change_feed.subscriber_count(ADMIN_NOTIFICATIONS_TOPIC) == 0
