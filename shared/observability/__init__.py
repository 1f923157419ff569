from .setup import setup_observability
from .metrics import (
    studio_bookings_total,
    studio_payment_verifications_total,
    studio_invoices_generated_total,
    studio_capacity_rejections_total,
    studio_realtime_subscribers
)
