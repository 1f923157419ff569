from services.auth_service.main import auth_app
from shared.security import verify_access_token

from conftest import api_client

ACCOUNT = {"email": "nila@example.com", "password": "wheel-and-kiln", "full_name": "Nila Iyer"}


async def test_register_login_and_profile():
    async with api_client(auth_app) as client:
        registered = await client.post("/register", json=ACCOUNT)
        duplicate = await client.post("/register", json=ACCOUNT)
        token = (await client.post("/login", json={"email": ACCOUNT["email"], "password": ACCOUNT["password"]})).json()
        headers = {"Authorization": f"Bearer {token['access_token']}"}
        me = await client.get("/me", headers=headers)
        updated = await client.patch("/me", json={"phone": "9876501234"}, headers=headers)
        bad_phone = await client.patch("/me", json={"phone": "12"}, headers=headers)

    assert registered.status_code == 201
    assert registered.json()["role"] == "customer"
    assert duplicate.status_code == 409
    assert verify_access_token(token["access_token"])["role"] == "customer"
    assert me.json()["email"] == ACCOUNT["email"]
    assert updated.json()["phone"] == "9876501234"
    assert updated.json()["full_name"] == "Nila Iyer"
    assert bad_phone.status_code == 422


async def test_login_failures():
    async with api_client(auth_app) as client:
        await client.post("/register", json=ACCOUNT)
        wrong = await client.post("/login", json={"email": ACCOUNT["email"], "password": "not-the-password"})
        unknown = await client.post("/login", json={"email": "ghost@example.com", "password": "whatever1"})
        short = await client.post("/register", json=dict(ACCOUNT, email="x@example.com", password="short"))
        anonymous = await client.get("/me")
        garbage = await client.get("/me", headers={"Authorization": "Bearer not-a-jwt"})

    assert wrong.status_code == 401
    assert unknown.status_code == 401
    assert short.status_code == 422
    assert anonymous.status_code == 401
    assert garbage.status_code == 401
