from fastapi import FastAPI
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from shared.config.database import Base, engine
from shared.errors import register_exception_handlers
from shared.observability import setup_observability
from shared.security import limiter

from services.notification_service.models import AdminNotification  # noqa: F401
from services.payment_service.models import Payment  # noqa: F401
from services.product_service.models import Product  # noqa: F401
from .models import Order, OrderItem  # noqa: F401 — registers models with SQLAlchemy Base
from .router import admin_router, public_router, router

order_app = FastAPI(title="Order Service", version="1.0.0")

# --- OBSERVABILITY BOOTSTRAP ---
setup_observability(order_app, "order_service")
register_exception_handlers(order_app)

# --- RATE LIMITING ---
order_app.state.limiter = limiter
order_app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

order_app.include_router(public_router)
order_app.include_router(admin_router)
order_app.include_router(router)

@order_app.on_event("startup")
async def startup_event():
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
