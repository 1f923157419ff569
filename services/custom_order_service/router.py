from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from shared.config.database import get_db
from shared.security import CurrentUser, get_optional_user, require_admin

from .schemas import CustomOrderCounts, CustomOrderCreate, CustomOrderResponse, CustomOrderUpdate, EmailRecord
from .service import CustomOrderService

router = APIRouter(prefix="/admin", dependencies=[Depends(require_admin)])
public_router = APIRouter()

@public_router.get("/health", include_in_schema=False)
async def health_check():
    return {"service": "custom_order", "status": "running"}


@public_router.post("/", response_model=CustomOrderResponse, status_code=status.HTTP_201_CREATED)
async def submit_request(
    payload: CustomOrderCreate,
    user: Optional[CurrentUser] = Depends(get_optional_user),
    db: AsyncSession = Depends(get_db),
):
    return await CustomOrderService.submit(db, payload, user)


@router.get("/", response_model=list[CustomOrderResponse])
async def list_requests(
    status_filter: Optional[str] = Query(None, alias="status"),
    search: Optional[str] = Query(None, max_length=100),
    db: AsyncSession = Depends(get_db),
):
    return await CustomOrderService.list_requests(db, status_filter, search)


@router.get("/counts", response_model=CustomOrderCounts)
async def request_counts(db: AsyncSession = Depends(get_db)):
    return await CustomOrderService.counts(db)


@router.get("/{request_id}", response_model=CustomOrderResponse)
async def get_request(request_id: int, db: AsyncSession = Depends(get_db)):
    return await CustomOrderService.get(db, request_id)


@router.patch("/{request_id}", response_model=CustomOrderResponse)
async def update_request(request_id: int, payload: CustomOrderUpdate, db: AsyncSession = Depends(get_db)):
    return await CustomOrderService.update(db, request_id, payload)


@router.delete("/{request_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_request(request_id: int, db: AsyncSession = Depends(get_db)):
    await CustomOrderService.delete(db, request_id)


@router.delete("/{request_id}/images", response_model=CustomOrderResponse)
async def remove_image(request_id: int, url: str = Query(..., min_length=1), db: AsyncSession = Depends(get_db)):
    return await CustomOrderService.remove_image(db, request_id, url)


@router.post("/{request_id}/emails", response_model=CustomOrderResponse)
async def record_email(request_id: int, payload: EmailRecord, db: AsyncSession = Depends(get_db)):
    return await CustomOrderService.record_email(db, request_id, payload)
