from fastapi import FastAPI

from shared.config.database import Base, engine
from shared.errors import register_exception_handlers
from shared.observability import setup_observability

from services.notification_service.models import AdminNotification  # noqa: F401
from .models import CustomOrderRequest  # noqa: F401 — registers model with SQLAlchemy Base
from .router import router, public_router

custom_order_app = FastAPI(title="Custom Order Service", version="1.0.0")

# --- OBSERVABILITY BOOTSTRAP ---
setup_observability(custom_order_app, "custom_order_service")
register_exception_handlers(custom_order_app)

custom_order_app.include_router(public_router)
custom_order_app.include_router(router)

@custom_order_app.on_event("startup")
async def startup_event():
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
