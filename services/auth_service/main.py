from fastapi import FastAPI

from shared.config.database import Base, engine
from shared.errors import register_exception_handlers
from shared.observability import setup_observability

from .models import User  # noqa: F401 — registers model with SQLAlchemy Base
from .router import router, public_router

auth_app = FastAPI(
    title="Auth Service",
    version="1.0.0",
    description="Customer and admin accounts: register, login, profile.",
)

# --- OBSERVABILITY BOOTSTRAP ---
setup_observability(auth_app, "auth_service")
register_exception_handlers(auth_app)

auth_app.include_router(public_router)
auth_app.include_router(router)

@auth_app.on_event("startup")
async def startup_event():
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
