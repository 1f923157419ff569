import asyncio

import pytest

from shared.errors import NotFound
from shared.observability import studio_realtime_subscribers
from shared.realtime import ChangeFeed, relay, workshop_topic


async def test_subscribers_receive_events_for_their_topic():
    feed = ChangeFeed()

    async with feed.subscribe(workshop_topic(1)) as first, feed.subscribe(workshop_topic(2)) as second:
        delivered = feed.publish(workshop_topic(1), {"id": 1})

        assert delivered == 1
        assert first.get_nowait() == {"id": 1}
        assert second.empty()


async def test_publish_without_subscribers_is_a_no_op():
    assert ChangeFeed().publish("nobody", {"x": 1}) == 0


async def test_lagging_subscriber_loses_oldest_event():
    feed = ChangeFeed(max_pending=2)

    async with feed.subscribe("topic") as queue:
        for n in range(3):
            feed.publish("topic", {"n": n})

        assert [queue.get_nowait()["n"] for _ in range(queue.qsize())] == [1, 2]


async def test_unsubscribe_cleans_up_and_tracks_gauge():
    feed = ChangeFeed()
    before = studio_realtime_subscribers._value.get()

    async with feed.subscribe("topic"):
        assert feed.subscriber_count("topic") == 1
        assert studio_realtime_subscribers._value.get() == before + 1

    assert feed.subscriber_count("topic") == 0
    assert studio_realtime_subscribers._value.get() == before


DISCONNECT = {"type": "websocket.disconnect", "code": 1000}


class FakeSocket:
    def __init__(self):
        self.incoming = asyncio.Queue()
        self.sent = []

    async def receive(self):
        return await self.incoming.get()

    async def send_json(self, data):
        self.sent.append(data)


async def wait_until(condition):
    async def poll():
        while not condition():
            await asyncio.sleep(0)

    await asyncio.wait_for(poll(), timeout=1)


async def test_relay_returns_when_an_idle_client_disconnects():
    feed = ChangeFeed()
    socket = FakeSocket()
    before = studio_realtime_subscribers._value.get()

    async with feed.subscribe("topic") as queue:
        socket.incoming.put_nowait(DISCONNECT)
        await asyncio.wait_for(relay(socket, queue), timeout=1)

    assert socket.sent == []
    assert feed.subscriber_count("topic") == 0
    assert studio_realtime_subscribers._value.get() == before


async def test_relay_renders_events_and_ignores_client_messages():
    feed = ChangeFeed()
    socket = FakeSocket()

    async def render(event):
        return {"rendered": event["n"]}

    async with feed.subscribe("topic") as queue:
        task = asyncio.create_task(relay(socket, queue, render))
        feed.publish("topic", {"n": 1})
        await wait_until(lambda: len(socket.sent) == 1)

        socket.incoming.put_nowait({"type": "websocket.receive", "text": "ping"})
        feed.publish("topic", {"n": 2})
        await wait_until(lambda: len(socket.sent) == 2)

        socket.incoming.put_nowait(DISCONNECT)
        await asyncio.wait_for(task, timeout=1)

    assert socket.sent == [{"rendered": 1}, {"rendered": 2}]


async def test_relay_propagates_render_errors():
    feed = ChangeFeed()

    async def render(event):
        raise NotFound("Workshop not found")

    async with feed.subscribe("topic") as queue:
        feed.publish("topic", {"id": 1, "deleted": True})
        with pytest.raises(NotFound):
            await asyncio.wait_for(relay(FakeSocket(), queue, render), timeout=1)
