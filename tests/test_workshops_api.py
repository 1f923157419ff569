from services.workshop_service.main import workshop_app
from services.workshop_service.service import WorkshopService
from shared.realtime import change_feed, workshop_topic

from conftest import WORKSHOP_DATE, api_client

FORM = {
    "title": "Glazing Weekend",
    "price": 3500,
    "duration": "2 days",
    "duration_days": 2,
    "location": "Studio",
    "details": ["Lunch included", "  ", ""],
    "date_slots": [
        {"date": "2030-02-02", "slots": [{"time": "10:00 AM", "max_spots": 6}]},
        {"date": "2030-02-01", "slots": [{"time": "10:00 AM", "max_spots": 6}, {"time": "3:00 PM", "max_spots": 4, "booked": 1}]},
    ],
}


async def test_public_detail_shows_grouped_availability(workshop):
    async with api_client(workshop_app) as client:
        resp = await client.get(f"/{workshop.id}")

    assert resp.status_code == 200
    body = resp.json()
    assert body["total_booked"] == 7
    assert body["total_max_spots"] == 18
    morning = body["date_slots"][0]["slots"][0]
    assert body["date_slots"][0]["date"] == WORKSHOP_DATE.isoformat()
    assert morning["available"] == 3
    assert morning["max_guests"] == 3
    assert body["date_slots"][0]["slots"][1]["max_guests"] == 6


async def test_unknown_workshop_is_404():
    async with api_client(workshop_app) as client:
        resp = await client.get("/999")

    assert resp.status_code == 404
    assert resp.json() == {"error": "Workshop not found"}


async def test_admin_creates_workshop_with_derived_fields(admin_headers):
    async with api_client(workshop_app) as client:
        resp = await client.post("/", json=FORM, headers=admin_headers)

    assert resp.status_code == 201, resp.text
    body = resp.json()
    assert body["details"] == ["Lunch included"]
    assert body["max_participants"] == 16
    assert body["current_participants"] == 1
    assert [d["date"] for d in body["date_slots"]] == ["2030-02-01", "2030-02-02"]


async def test_customers_cannot_manage_workshops(customer_headers):
    async with api_client(workshop_app) as client:
        anonymous = await client.post("/", json=FORM)
        customer = await client.post("/", json=FORM, headers=customer_headers)

    assert anonymous.status_code == 401
    assert customer.status_code == 403


async def test_invalid_form_is_rejected(admin_headers):
    form = dict(FORM, title="ab")
    async with api_client(workshop_app) as client:
        short_title = await client.post("/", json=form, headers=admin_headers)
        overbooked = await client.post(
            "/",
            json=dict(FORM, date_slots=[{"date": "2030-02-01", "slots": [{"time": "9:00", "max_spots": 2, "booked": 3}]}]),
            headers=admin_headers,
        )

    assert short_title.status_code == 422
    assert overbooked.status_code == 400
    assert "booked cannot exceed max_spots" in overbooked.json()["error"]


async def test_inactive_workshops_only_listed_for_admins(workshop, admin_headers, db):
    workshop.is_active = False
    await db.commit()

    async with api_client(workshop_app) as client:
        public = await client.get("/")
        admin = await client.get("/admin/all", headers=admin_headers)

    assert public.json() == []
    assert [w["id"] for w in admin.json()] == [workshop.id]


async def test_update_publishes_slot_change(workshop, admin_headers):
    async with change_feed.subscribe(workshop_topic(workshop.id)) as queue:
        async with api_client(workshop_app) as client:
            resp = await client.put(f"/{workshop.id}", json=FORM, headers=admin_headers)

        assert resp.status_code == 200
        event = queue.get_nowait()

    assert event["id"] == workshop.id
    assert len(event["time_slots"]) == 3


async def test_month_calendar(workshop, admin_headers):
    async with api_client(workshop_app) as client:
        resp = await client.get("/admin/calendar", params={"year": 2030, "month": 1}, headers=admin_headers)
        empty = await client.get("/admin/calendar", params={"year": 2030, "month": 3}, headers=admin_headers)

    days = resp.json()
    assert len(days) == 1
    assert days[0]["date"] == WORKSHOP_DATE.isoformat()
    assert days[0]["total_bookings"] == 7
    assert days[0]["workshops"][0]["max_spots"] == 18
    assert empty.json() == []


async def test_reserve_spots_updates_participants(workshop, db):
    updated = await WorkshopService.reserve_spots(db, workshop.id, WORKSHOP_DATE.isoformat(), "2:00 PM", 4)
    await db.commit()

    assert updated.current_participants == 11
    assert updated.time_slots[1]["booked"] == 4


async def test_delete_workshop_tells_watchers(workshop, admin_headers):
    async with change_feed.subscribe(workshop_topic(workshop.id)) as queue:
        async with api_client(workshop_app) as client:
            deleted = await client.delete(f"/{workshop.id}", headers=admin_headers)
            missing = await client.get(f"/{workshop.id}")
        event = queue.get_nowait()

    assert deleted.status_code == 204
    assert missing.status_code == 404
    assert event == {"id": workshop.id, "deleted": True}
