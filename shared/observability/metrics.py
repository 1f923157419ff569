from prometheus_client import Counter, Gauge

# Business Metrics
studio_bookings_total = Counter(
    "studio_bookings_total",
    "Bookings created or confirmed",
    ["kind", "status"] # kind: 'workshop' | 'experience', status: 'pending' | 'confirmed'
)

studio_payment_verifications_total = Counter(
    "studio_payment_verifications_total",
    "Payment signature verifications",
    ["purpose", "result"] # result: 'verified' | 'rejected'
)

studio_invoices_generated_total = Counter(
    "studio_invoices_generated_total",
    "GST invoices rendered and stored"
)

studio_capacity_rejections_total = Counter(
    "studio_capacity_rejections_total",
    "Booking requests rejected for lack of slot capacity",
    ["stage"] # Labels: 'create', 'confirm'
)

studio_realtime_subscribers = Gauge(
    "studio_realtime_subscribers",
    "Open realtime change-feed subscriptions"
)
