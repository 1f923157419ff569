from fastapi import FastAPI
from shared.config.database import engine, Base

# IMPORTANT: import models so they register with Base
from services.auth_service import models as auth_models
from services.workshop_service import models as workshop_models
from services.booking_service import models as booking_models
from services.payment_service import models as payment_models
from services.product_service import models as product_models
from services.order_service import models as order_models
from services.settings_service import models as settings_models
from services.custom_order_service import models as custom_order_models
from services.notification_service import models as notification_models
from services.testimonial_service import models as testimonial_models

from services.auth_service.main import auth_app
from services.workshop_service.main import workshop_app
from services.booking_service.main import booking_app
from services.payment_service.main import payment_app
from services.product_service.main import product_app
from services.order_service.main import order_app
from services.invoice_service.main import invoice_app
from services.custom_order_service.main import custom_order_app
from services.notification_service.main import notification_app
from services.settings_service.main import settings_app
from services.testimonial_service.main import testimonial_app

app = FastAPI(title="Pottery Studio Cluster")

@app.on_event("startup")
async def startup_event():
    async with engine.begin() as conn:
        # Create all tables
        await conn.run_sync(Base.metadata.create_all)

app.mount("/auth", auth_app)
app.mount("/workshops", workshop_app)
app.mount("/bookings", booking_app)
app.mount("/payments", payment_app)
app.mount("/products", product_app)
app.mount("/orders", order_app)
app.mount("/invoices", invoice_app)
app.mount("/custom-orders", custom_order_app)
app.mount("/notifications", notification_app)
app.mount("/settings", settings_app)
app.mount("/testimonials", testimonial_app)
