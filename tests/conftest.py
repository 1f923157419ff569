import os

# Configuration is read at import time, so it has to be in place first
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key")
os.environ["OBSERVABILITY_ENABLED"] = "false"
os.environ["RATE_LIMIT_ENABLED"] = "false"

from datetime import date

import pytest
from httpx import ASGITransport, AsyncClient

import main  # noqa: F401 — mounts every service and registers all models
from services.booking_service.main import booking_app
from services.invoice_service.main import invoice_app
from services.invoice_service.storage import InvoiceStore, get_invoice_store
from services.order_service.main import order_app
from services.payment_service.gateway import RazorpayGateway, get_payment_gateway, sign, to_paise
from services.product_service.models import Product
from services.settings_service.models import BusinessSettings
from services.workshop_service.models import Workshop
from shared.config.database import AsyncSessionLocal, Base, engine
from shared.security import create_access_token

CUSTOMER_ID = 101
OTHER_CUSTOMER_ID = 202
ADMIN_ID = 1

WORKSHOP_DATE = date(2030, 1, 15)


class FakeGateway(RazorpayGateway):
    """Real signature checks, canned order creation."""

    def __init__(self):
        super().__init__(key_id="rzp_test_key", key_secret="rzp_test_secret")
        self.orders: list[dict] = []

    async def create_order(self, amount: float, receipt: str, notes: dict) -> dict:
        order = {
            "id": f"order_test_{len(self.orders) + 1}",
            "amount": to_paise(amount),
            "currency": "INR",
            "receipt": receipt,
            "notes": notes,
        }
        self.orders.append(order)
        return order

    def signature_for(self, order_id: str, payment_id: str) -> str:
        return sign("rzp_test_secret", order_id, payment_id)


def bearer(user_id: int, role: str = "customer") -> dict:
    token = create_access_token({"sub": str(user_id), "role": role})
    return {"Authorization": f"Bearer {token}"}


def api_client(app) -> AsyncClient:
    return AsyncClient(transport=ASGITransport(app=app), base_url="http://test")


@pytest.fixture(autouse=True)
async def database():
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest.fixture
async def db():
    async with AsyncSessionLocal() as session:
        yield session


@pytest.fixture
def gateway():
    fake = FakeGateway()
    for app in (booking_app, order_app):
        app.dependency_overrides[get_payment_gateway] = lambda: fake
    yield fake
    for app in (booking_app, order_app):
        app.dependency_overrides.pop(get_payment_gateway, None)


@pytest.fixture
def invoice_store(tmp_path):
    store = InvoiceStore(tmp_path / "invoices", "http://files.test/invoices")
    invoice_app.dependency_overrides[get_invoice_store] = lambda: store
    yield store
    invoice_app.dependency_overrides.pop(get_invoice_store, None)


@pytest.fixture
def customer_headers():
    return bearer(CUSTOMER_ID)


@pytest.fixture
def other_headers():
    return bearer(OTHER_CUSTOMER_ID)


@pytest.fixture
def admin_headers():
    return bearer(ADMIN_ID, role="admin")


@pytest.fixture
async def workshop(db):
    """Active workshop with one 10-spot slot that already has 7 booked."""
    record = Workshop(
        title="Wheel Throwing Basics",
        price=2000.0,
        duration="3 hours",
        duration_days=1,
        location="Studio, Ahmedabad",
        details=["Clay included"],
        time_slots=[
            {"date": WORKSHOP_DATE.isoformat(), "time": "10:00 AM", "max_spots": 10, "booked": 7},
            {"date": WORKSHOP_DATE.isoformat(), "time": "2:00 PM", "max_spots": 8, "booked": 0},
        ],
        workshop_date=WORKSHOP_DATE,
        max_participants=18,
        current_participants=7,
        workshop_type="group",
        is_active=True,
    )
    db.add(record)
    await db.commit()
    await db.refresh(record)
    return record


@pytest.fixture
async def products(db):
    items = [
        Product(name="Speckled Mug", price=1180.0, category="mugs", in_stock=True),
        Product(name="Serving Platter", price=2360.0, category="plates", in_stock=True),
        Product(name="Moon Jar", price=5900.0, category="vases", in_stock=False),
    ]
    db.add_all(items)
    await db.commit()
    for item in items:
        await db.refresh(item)
    return items


@pytest.fixture
async def business_settings(db):
    record = BusinessSettings(
        gstin="24ABCDE1234F1Z5",
        legal_name="Clay Studio LLP",
        trade_name="Clay Studio",
        address_line1="12 Potters Lane",
        city="Ahmedabad",
        state="Gujarat",
        state_code="24",
        pincode="380015",
        email="hello@claystudio.test",
        bank_name="State Bank",
        bank_account_number="001122334455",
        bank_ifsc="SBIN0000123",
    )
    db.add(record)
    await db.commit()
    return record
