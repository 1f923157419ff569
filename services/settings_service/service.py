from sqlalchemy.ext.asyncio import AsyncSession
import structlog

from shared.errors import NotFound, ValidationFailed
from shared.gst import INDIAN_STATES, get_state_by_code, validate_gstin

from .models import BusinessSettings
from .repository import SettingsRepository
from .schemas import BusinessSettingsUpdate

logger = structlog.get_logger(__name__)


class SettingsService:
    @staticmethod
    async def get_settings(db: AsyncSession) -> BusinessSettings:
        settings = await SettingsRepository.get(db)
        if not settings:
            raise NotFound("Business settings not configured")
        return settings

    @staticmethod
    async def upsert_settings(db: AsyncSession, data: BusinessSettingsUpdate) -> BusinessSettings:
        state = get_state_by_code(data.state_code)
        if state is None:
            raise ValidationFailed("Unknown state code")

        values = data.model_dump()
        gstin = (data.gstin or "").strip().upper()
        if gstin:
            validate_gstin(gstin)
        values["gstin"] = gstin or None
        if data.pan:
            values["pan"] = data.pan.strip().upper()
        if data.bank_ifsc:
            values["bank_ifsc"] = data.bank_ifsc.strip().upper()
        # Picking a state by code fills both fields
        values["state"] = state.name
        values["state_code"] = state.code

        settings = await SettingsRepository.get(db) or BusinessSettings()
        for field, value in values.items():
            setattr(settings, field, value)
        settings = await SettingsRepository.save(db, settings)
        logger.info("business_settings_saved", state_code=settings.state_code, has_gstin=bool(settings.gstin))
        return settings

    @staticmethod
    def states() -> list[dict]:
        return [{"code": s.code, "name": s.name} for s in INDIAN_STATES]
