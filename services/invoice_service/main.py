from fastapi import FastAPI

from shared.config.database import Base, engine
from shared.errors import register_exception_handlers
from shared.observability import setup_observability

from services.order_service.models import Order, OrderItem  # noqa: F401
from services.settings_service.models import BusinessSettings  # noqa: F401 — registers models with SQLAlchemy Base
from .router import router, public_router

invoice_app = FastAPI(title="Invoice Service", version="1.0.0")

# --- OBSERVABILITY BOOTSTRAP ---
setup_observability(invoice_app, "invoice_service")
register_exception_handlers(invoice_app)

invoice_app.include_router(public_router)
invoice_app.include_router(router)

@invoice_app.on_event("startup")
async def startup_event():
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
