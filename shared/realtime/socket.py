import asyncio
from typing import Awaitable, Callable, Optional

from fastapi import WebSocket

Render = Callable[[dict], Awaitable[dict]]


async def relay(websocket: WebSocket, queue: asyncio.Queue, render: Optional[Render] = None) -> None:
    """
    Forward events from a feed queue to an accepted websocket.

    The socket is read alongside the queue, so a client that goes away is
    noticed even while no events arrive. Returns once the client
    disconnects; whatever `render` raises propagates to the caller.
    """
    receiver = asyncio.ensure_future(websocket.receive())
    getter = asyncio.ensure_future(queue.get())
    try:
        while True:
            done, _ = await asyncio.wait({receiver, getter}, return_when=asyncio.FIRST_COMPLETED)
            if receiver in done:
                if receiver.result()["type"] == "websocket.disconnect":
                    return
                # Client chatter is ignored
                receiver = asyncio.ensure_future(websocket.receive())
            if getter in done:
                event = getter.result()
                await websocket.send_json(await render(event) if render else event)
                getter = asyncio.ensure_future(queue.get())
    finally:
        receiver.cancel()
        getter.cancel()
