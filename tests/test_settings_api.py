from services.settings_service.main import settings_app

from conftest import api_client

FORM = {
    "gstin": "24abcde1234f1z5",
    "legal_name": "Clay Studio LLP",
    "trade_name": "Clay Studio",
    "address_line1": "12 Potters Lane",
    "city": "Ahmedabad",
    "state_code": "24",
    "pincode": "380015",
    "pan": "abcde1234f",
    "bank_ifsc": "sbin0000123",
}


async def test_settings_missing_until_saved():
    async with api_client(settings_app) as client:
        resp = await client.get("/")

    assert resp.status_code == 404
    assert resp.json() == {"error": "Business settings not configured"}


async def test_admin_saves_single_settings_row(admin_headers):
    async with api_client(settings_app) as client:
        first = await client.put("/", json=FORM, headers=admin_headers)
        second = await client.put("/", json=dict(FORM, gstin="", state_code="27", city="Pune"), headers=admin_headers)
        current = await client.get("/")

    assert first.status_code == 200, first.text
    assert first.json()["gstin"] == "24ABCDE1234F1Z5"
    assert first.json()["state"] == "Gujarat"
    assert first.json()["pan"] == "ABCDE1234F"
    assert first.json()["bank_ifsc"] == "SBIN0000123"
    assert second.json()["gstin"] is None
    assert current.json()["state"] == "Maharashtra"
    assert current.json()["city"] == "Pune"


async def test_settings_validation(admin_headers, customer_headers):
    async with api_client(settings_app) as client:
        bad_gstin = await client.put("/", json=dict(FORM, gstin="24ABC"), headers=admin_headers)
        bad_state = await client.put("/", json=dict(FORM, gstin=None, state_code="99"), headers=admin_headers)
        bad_pincode = await client.put("/", json=dict(FORM, pincode="38001"), headers=admin_headers)
        customer = await client.put("/", json=FORM, headers=customer_headers)

    assert bad_gstin.status_code == 400
    assert bad_state.json() == {"error": "Unknown state code"}
    assert bad_pincode.status_code == 422
    assert customer.status_code == 403


async def test_state_options():
    async with api_client(settings_app) as client:
        states = (await client.get("/states")).json()

    assert {"code": "24", "name": "Gujarat"} in states
    assert len({s["code"] for s in states}) == len(states)
