from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect, status
from sqlalchemy.ext.asyncio import AsyncSession

from shared.config.database import get_db
from shared.realtime import ADMIN_NOTIFICATIONS_TOPIC, change_feed, relay
from shared.security import CurrentUser, require_admin, websocket_admin

from .schemas import NotificationFeed, NotificationResponse
from .service import NotificationService

router = APIRouter(dependencies=[Depends(require_admin)])
public_router = APIRouter()

@public_router.get("/health", include_in_schema=False)
async def health_check():
    return {"service": "notification", "status": "running"}


@public_router.websocket("/live")
async def notifications_feed(websocket: WebSocket, admin: CurrentUser | None = Depends(websocket_admin)):
    if admin is None:
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return

    async with change_feed.subscribe(ADMIN_NOTIFICATIONS_TOPIC) as queue:
        await websocket.accept()
        try:
            await relay(websocket, queue)
        except WebSocketDisconnect:
            return


@router.get("/", response_model=NotificationFeed)
async def list_notifications(db: AsyncSession = Depends(get_db)):
    return await NotificationService.feed(db)


@router.patch("/read-all")
async def mark_all_read(db: AsyncSession = Depends(get_db)):
    updated = await NotificationService.mark_all_read(db)
    return {"updated": updated}


@router.patch("/{notification_id}/read", response_model=NotificationResponse)
async def mark_read(notification_id: int, db: AsyncSession = Depends(get_db)):
    return await NotificationService.mark_read(db, notification_id)


@router.delete("/{notification_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_notification(notification_id: int, db: AsyncSession = Depends(get_db)):
    await NotificationService.delete(db, notification_id)
