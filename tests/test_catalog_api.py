from services.product_service.main import product_app
from services.product_service.service import matches_query
from services.testimonial_service.main import testimonial_app

from conftest import api_client

VIDEO = {"title": "First wheel class", "video_url": "https://cdn.test/v1.mp4", "customer_name": "Ira"}


async def test_product_listing_filters(products):
    async with api_client(product_app) as client:
        everything = await client.get("/")
        mugs = await client.get("/", params={"category": "mugs"})
        searched = await client.get("/", params={"query": "platter bowl"})
        one = await client.get(f"/{products[2].id}")
        missing = await client.get("/9999")

    assert len(everything.json()) == 3
    assert [p["name"] for p in mugs.json()] == ["Speckled Mug"]
    assert [p["name"] for p in searched.json()] == ["Serving Platter"]
    assert one.json()["in_stock"] is False
    assert one.json()["hsn_code"] == "6912"
    assert missing.json() == {"error": "Product not found"}


async def test_query_matches_whole_words(products):
    assert matches_query(products[0], "MUG")
    assert not matches_query(products[0], "mu")


async def test_admin_manages_products(admin_headers, customer_headers):
    form = {"name": "Tea Bowl", "price": 890, "category": "bowls"}
    async with api_client(product_app) as client:
        created = await client.post("/", json=form, headers=admin_headers)
        updated = await client.put(f"/{created.json()['id']}", json=dict(form, in_stock=False), headers=admin_headers)
        forbidden = await client.post("/", json=form, headers=customer_headers)
        bad_price = await client.post("/", json=dict(form, price=0), headers=admin_headers)

    assert created.status_code == 201
    assert updated.json()["in_stock"] is False
    assert forbidden.status_code == 403
    assert bad_price.status_code == 422


async def test_only_approved_testimonials_are_public(admin_headers):
    async with api_client(testimonial_app) as client:
        hidden = (await client.post("/admin/", json=VIDEO, headers=admin_headers)).json()
        plain = (await client.post("/admin/", json=dict(VIDEO, title="Glazing day", is_approved=True), headers=admin_headers)).json()
        featured = (
            await client.post("/admin/", json=dict(VIDEO, title="Birthday party", is_approved=True), headers=admin_headers)
        ).json()
        await client.patch(f"/admin/{featured['id']}", json={"is_featured": True}, headers=admin_headers)

        public = await client.get("/")
        admin = await client.get("/admin/", headers=admin_headers)
        approved = await client.patch(f"/admin/{hidden['id']}", json={"is_approved": True}, headers=admin_headers)
        deleted = await client.delete(f"/admin/{plain['id']}", headers=admin_headers)
        missing = await client.patch(f"/admin/{plain['id']}", json={"is_approved": False}, headers=admin_headers)

    assert [t["title"] for t in public.json()] == ["Birthday party", "Glazing day"]
    assert len(admin.json()) == 3
    assert approved.json()["is_approved"] is True
    assert approved.json()["is_featured"] is False
    assert deleted.status_code == 204
    assert missing.status_code == 404


async def test_testimonial_admin_requires_admin(customer_headers):
    async with api_client(testimonial_app) as client:
        resp = await client.post("/admin/", json=VIDEO, headers=customer_headers)

    assert resp.status_code == 403
