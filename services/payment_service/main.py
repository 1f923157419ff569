from fastapi import FastAPI

from shared.config.database import Base, engine
from shared.errors import register_exception_handlers
from shared.observability import setup_observability

from .models import Payment  # noqa: F401 — registers model with SQLAlchemy Base
from .router import router, public_router


payment_app = FastAPI(title="Payment Service", version="1.0.0")

setup_observability(payment_app, "payment_service")
register_exception_handlers(payment_app)

payment_app.include_router(public_router)
payment_app.include_router(router)

@payment_app.on_event("startup")
async def startup_event():
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
