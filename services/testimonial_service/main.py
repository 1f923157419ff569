from fastapi import FastAPI

from shared.config.database import Base, engine
from shared.errors import register_exception_handlers
from shared.observability import setup_observability

from .models import VideoTestimonial  # noqa: F401 — registers model with SQLAlchemy Base
from .router import router, public_router

testimonial_app = FastAPI(title="Testimonial Service", version="1.0.0")

# --- OBSERVABILITY BOOTSTRAP ---
setup_observability(testimonial_app, "testimonial_service")
register_exception_handlers(testimonial_app)

testimonial_app.include_router(public_router)
testimonial_app.include_router(router)

@testimonial_app.on_event("startup")
async def startup_event():
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
