from sqlalchemy import select

from services.notification_service.models import AdminNotification
from services.order_service.main import order_app
from services.order_service.models import Order, OrderItem
from services.order_service.schemas import OrderVerify
from services.order_service.service import OrderService, new_order_number, resolve_buyer_state
from shared.security import CurrentUser

from conftest import CUSTOMER_ID, api_client

SHIPPING = {
    "customer_name": "Ravi Shah",
    "customer_email": "ravi@example.com",
    "customer_phone": "9123456780",
    "shipping_address": "4 Lake Road, Ahmedabad",
}


def checkout_form(products, quantities, **extra):
    items = [{"product_id": p.id, "quantity": q} for p, q in zip(products, quantities)]
    return dict(SHIPPING, items=items, **extra)


def order_verification(gateway, checkout, payment_id="pay_order_1"):
    return {
        "order_number": checkout["order_number"],
        "razorpay_order_id": checkout["order_id"],
        "razorpay_payment_id": payment_id,
        "razorpay_signature": gateway.signature_for(checkout["order_id"], payment_id),
    }


def test_order_number_format():
    number = new_order_number()
    assert number.startswith("ORD-")
    assert len(number.split("-")[1]) == 8
    assert len(number.split("-")[2]) == 6


def test_buyer_state_resolution():
    assert resolve_buyer_state(" 27aapfu0939f1zv ", None) == ("27AAPFU0939F1ZV", "27")
    assert resolve_buyer_state(None, "29") == (None, "29")
    assert resolve_buyer_state(None, None) == (None, "24")


async def test_intra_state_checkout_splits_cgst_and_sgst(products, gateway, customer_headers, db):
    mug = products[0]
    async with api_client(order_app) as client:
        resp = await client.post("/checkout", json=checkout_form([mug], [1]), headers=customer_headers)

    assert resp.status_code == 201, resp.text
    body = resp.json()
    assert body["subtotal"] == 1180
    assert body["taxable_amount"] == 1000
    assert body["cgst_amount"] == 90
    assert body["sgst_amount"] == 90
    assert body["igst_amount"] == 0
    assert body["shipping_cost"] == 150
    assert body["amount"] == 1330
    assert gateway.orders[0]["amount"] == 133000

    order = (await db.execute(select(Order))).scalars().one()
    assert order.buyer_state_code == "24"
    assert order.buyer_gstin is None
    assert order.payment_status == "pending"
    assert [(i.item_name, i.quantity, i.total_price) for i in order.items] == [("Speckled Mug", 1, 1180)]


async def test_gstin_buyer_from_other_state_pays_igst(products, gateway, customer_headers):
    form = checkout_form(products[:2], [1, 1], buyer_gstin="27AAPFU0939F1ZV")
    async with api_client(order_app) as client:
        resp = await client.post("/checkout", json=form, headers=customer_headers)

    body = resp.json()
    assert body["subtotal"] == 3540
    assert body["taxable_amount"] == 3000
    assert body["igst_amount"] == 540
    assert body["cgst_amount"] == body["sgst_amount"] == 0
    assert body["shipping_cost"] == 0
    assert body["amount"] == 3540


async def test_checkout_rejects_bad_carts(products, gateway, customer_headers):
    async with api_client(order_app) as client:
        sold_out = await client.post("/checkout", json=checkout_form([products[2]], [1]), headers=customer_headers)
        missing = await client.post(
            "/checkout", json=dict(SHIPPING, items=[{"product_id": 9999, "quantity": 1}]), headers=customer_headers
        )
        bad_gstin = await client.post(
            "/checkout", json=checkout_form([products[0]], [1], buyer_gstin="NOTAGSTIN"), headers=customer_headers
        )
        empty = await client.post("/checkout", json=dict(SHIPPING, items=[]), headers=customer_headers)

    assert sold_out.status_code == 400
    assert sold_out.json() == {"error": "Moon Jar is out of stock"}
    assert missing.status_code == 404
    assert bad_gstin.status_code == 400
    assert empty.status_code == 422
    assert gateway.orders == []


async def test_verify_marks_order_paid_and_notifies(products, gateway, customer_headers, other_headers, db):
    async with api_client(order_app) as client:
        checkout = (await client.post("/checkout", json=checkout_form([products[0]], [2]), headers=customer_headers)).json()
        stranger = await client.post("/verify", json=order_verification(gateway, checkout), headers=other_headers)
        resp = await client.post("/verify", json=order_verification(gateway, checkout), headers=customer_headers)
        again = await client.post("/verify", json=order_verification(gateway, checkout), headers=customer_headers)
        mine = await client.get("/me", headers=customer_headers)

    assert stranger.status_code == 404
    assert resp.status_code == 200, resp.text
    assert resp.json()["payment_status"] == "paid"
    assert resp.json()["order_status"] == "confirmed"
    assert again.status_code == 200
    assert [o["order_number"] for o in mine.json()] == [checkout["order_number"]]

    notifications = (await db.execute(select(AdminNotification))).scalars().all()
    assert len(notifications) == 1
    assert notifications[0].type == "order"
    assert notifications[0].order_id == checkout["id"]


async def test_verify_with_a_stale_session_notifies_once(products, gateway, customer_headers, db):
    async with api_client(order_app) as client:
        checkout = (await client.post("/checkout", json=checkout_form([products[0]], [1]), headers=customer_headers)).json()
        payload = order_verification(gateway, checkout)

        stale = await db.get(Order, checkout["id"])
        assert stale.payment_status == "pending"
        first = await client.post("/verify", json=payload, headers=customer_headers)
        assert first.status_code == 200

    order = await OrderService.verify_payment(db, gateway, CurrentUser(CUSTOMER_ID, "customer"), OrderVerify(**payload))

    assert order.payment_status == "paid"
    notifications = (await db.execute(select(AdminNotification))).scalars().all()
    assert len(notifications) == 1


async def test_verify_with_bad_signature(products, gateway, customer_headers):
    async with api_client(order_app) as client:
        checkout = (await client.post("/checkout", json=checkout_form([products[0]], [1]), headers=customer_headers)).json()
        payload = dict(order_verification(gateway, checkout), razorpay_signature="deadbeef")
        resp = await client.post("/verify", json=payload, headers=customer_headers)
        order = await client.get(f"/me/{checkout['id']}", headers=customer_headers)

    assert resp.status_code == 400
    assert order.json()["payment_status"] == "pending"


async def test_admin_status_ladder_and_delete(products, gateway, customer_headers, admin_headers, db):
    async with api_client(order_app) as client:
        checkout = (await client.post("/checkout", json=checkout_form([products[0]], [1]), headers=customer_headers)).json()
        order_id = checkout["id"]

        shipped = await client.patch(f"/admin/{order_id}/status", json={"order_status": "shipped"}, headers=admin_headers)
        back = await client.patch(f"/admin/{order_id}/status", json={"order_status": "processing"}, headers=admin_headers)
        unknown = await client.patch(f"/admin/{order_id}/status", json={"order_status": "lost"}, headers=admin_headers)
        cancelled = await client.patch(f"/admin/{order_id}/status", json={"order_status": "cancelled"}, headers=admin_headers)
        after_cancel = await client.patch(
            f"/admin/{order_id}/status", json={"order_status": "delivered"}, headers=admin_headers
        )
        filtered = await client.get("/admin/", params={"order_status": "cancelled"}, headers=admin_headers)
        searched = await client.get("/admin/", params={"search": "ravi"}, headers=admin_headers)
        forbidden = await client.get("/admin/", headers=customer_headers)
        deleted = await client.delete(f"/admin/{order_id}", headers=admin_headers)
        gone = await client.get(f"/admin/{order_id}", headers=admin_headers)

    assert shipped.json()["order_status"] == "shipped"
    assert back.status_code == 409
    assert unknown.status_code == 409
    assert cancelled.json()["order_status"] == "cancelled"
    assert after_cancel.status_code == 409
    assert [o["id"] for o in filtered.json()] == [order_id]
    assert [o["id"] for o in searched.json()] == [order_id]
    assert forbidden.status_code == 403
    assert deleted.status_code == 204
    assert gone.status_code == 404
    assert (await db.execute(select(OrderItem))).scalars().all() == []
