from fastapi import APIRouter, Depends, Query, WebSocket, WebSocketDisconnect, status
from sqlalchemy.ext.asyncio import AsyncSession

from shared.config.database import AsyncSessionLocal, get_db
from shared.errors import NotFound
from shared.realtime import change_feed, relay, workshop_topic
from shared.security import require_admin

from .schemas import CalendarDay, WorkshopCreate, WorkshopDetail, WorkshopResponse, WorkshopUpdate
from .service import WorkshopService

router = APIRouter(dependencies=[Depends(require_admin)])
public_router = APIRouter()

@public_router.get("/health", include_in_schema=False)
async def health_check():
    return {"service": "workshop", "status": "running"}


@public_router.get("/", response_model=list[WorkshopResponse])
async def list_workshops(db: AsyncSession = Depends(get_db)):
    return await WorkshopService.list_workshops(db, active_only=True)


@public_router.get("/{workshop_id}", response_model=WorkshopDetail)
async def get_workshop(workshop_id: int, db: AsyncSession = Depends(get_db)):
    return await WorkshopService.get_detail(db, workshop_id)


@public_router.websocket("/{workshop_id}/live")
async def workshop_slots_feed(websocket: WebSocket, workshop_id: int):
    """Pushes the grouped slot view every time the workshop's slots change."""
    async with AsyncSessionLocal() as db:
        try:
            snapshot = WorkshopService.describe(await WorkshopService.get_workshop(db, workshop_id))
        except NotFound:
            await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
            return

    async def render_detail(event: dict) -> dict:
        async with AsyncSessionLocal() as db:
            detail = await WorkshopService.get_detail(db, workshop_id)
        return detail.model_dump(mode="json")

    await websocket.accept()
    async with change_feed.subscribe(workshop_topic(workshop_id)) as queue:
        await websocket.send_json(snapshot.model_dump(mode="json"))
        try:
            await relay(websocket, queue, render_detail)
        except NotFound:
            # Deleted while the client was watching
            await websocket.close(code=status.WS_1000_NORMAL_CLOSURE)
        except WebSocketDisconnect:
            return


@router.get("/admin/all", response_model=list[WorkshopResponse])
async def list_all_workshops(db: AsyncSession = Depends(get_db)):
    return await WorkshopService.list_workshops(db, active_only=False)


@router.get("/admin/calendar", response_model=list[CalendarDay])
async def bookings_calendar(
    year: int = Query(..., ge=2000, le=2100),
    month: int = Query(..., ge=1, le=12),
    db: AsyncSession = Depends(get_db),
):
    return await WorkshopService.month_calendar(db, year, month)


@router.post("/", response_model=WorkshopDetail, status_code=status.HTTP_201_CREATED)
async def create_workshop(payload: WorkshopCreate, db: AsyncSession = Depends(get_db)):
    return await WorkshopService.create_workshop(db, payload)


@router.put("/{workshop_id}", response_model=WorkshopDetail)
async def update_workshop(workshop_id: int, payload: WorkshopUpdate, db: AsyncSession = Depends(get_db)):
    return await WorkshopService.update_workshop(db, workshop_id, payload)


@router.delete("/{workshop_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_workshop(workshop_id: int, db: AsyncSession = Depends(get_db)):
    await WorkshopService.delete_workshop(db, workshop_id)
