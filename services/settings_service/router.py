from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from shared.config.database import get_db
from shared.security import require_admin

from .schemas import BusinessSettingsResponse, BusinessSettingsUpdate, StateOption
from .service import SettingsService

router = APIRouter(dependencies=[Depends(require_admin)])
public_router = APIRouter()

@public_router.get("/health", include_in_schema=False)
async def health_check():
    return {"service": "settings", "status": "running"}


@public_router.get("/", response_model=BusinessSettingsResponse)
async def get_settings(db: AsyncSession = Depends(get_db)):
    return await SettingsService.get_settings(db)


@public_router.get("/states", response_model=list[StateOption])
async def list_states():
    return SettingsService.states()


@router.put("/", response_model=BusinessSettingsResponse)
async def upsert_settings(payload: BusinessSettingsUpdate, db: AsyncSession = Depends(get_db)):
    return await SettingsService.upsert_settings(db, payload)
