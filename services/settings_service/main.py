from fastapi import FastAPI

from shared.config.database import Base, engine
from shared.errors import register_exception_handlers
from shared.observability import setup_observability

from .models import BusinessSettings  # noqa: F401 — registers model with SQLAlchemy Base
from .router import router, public_router

settings_app = FastAPI(title="Settings Service", version="1.0.0")

# --- OBSERVABILITY BOOTSTRAP ---
setup_observability(settings_app, "settings_service")
register_exception_handlers(settings_app)

settings_app.include_router(public_router)
settings_app.include_router(router)

@settings_app.on_event("startup")
async def startup_event():
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
