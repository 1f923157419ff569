from fastapi import FastAPI

from shared.config.database import Base, engine
from shared.errors import register_exception_handlers
from shared.observability import setup_observability

from .models import Workshop  # noqa: F401 — registers model with SQLAlchemy Base
from .router import router, public_router

workshop_app = FastAPI(title="Workshop Service", version="1.0.0")

# --- OBSERVABILITY BOOTSTRAP ---
setup_observability(workshop_app, "workshop_service")
register_exception_handlers(workshop_app)

workshop_app.include_router(public_router)
workshop_app.include_router(router)

@workshop_app.on_event("startup")
async def startup_event():
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
