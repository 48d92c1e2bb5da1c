import pytest
from httpx import ASGITransport, AsyncClient

from storefront.db.session import get_db
from storefront.main import app


@pytest.fixture
async def client(session_factory):
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver") as client:
        yield client
    app.dependency_overrides.clear()


@pytest.mark.asyncio
async def test_health(client):
    response = await client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "ok"


@pytest.mark.asyncio
async def test_empty_cart_is_null(client):
    response = await client.get("/api/cart")

    assert response.status_code == 200
    assert response.json() is None


@pytest.mark.asyncio
async def test_cart_flow(client, product, make_line):
    line = make_line(product)
    del line["qty"]

    response = await client.post("/api/cart/add", json=line)

    assert response.status_code == 200
    assert response.json() == {"success": True, "message": "1 item of Ceramic Basin added to cart"}
    assert response.headers["HX-Trigger"] == "cart-changed"

    response = await client.put("/api/cart/update", json={"product_id": product.id, "quantity": 4})
    assert response.json()["success"] is True

    cart = (await client.get("/api/cart")).json()
    assert cart["items"][0]["qty"] == 4
    assert cart["items_price"] == "100.00"
    assert cart["shipping_price"] == "0.00"
    assert cart["tax_price"] == "15.00"
    assert cart["total_price"] == "115.00"

    response = await client.post(f"/api/cart/decrement/{product.id}")
    assert response.json()["success"] is True

    response = await client.delete(f"/api/cart/remove/{product.id}")
    assert response.json() == {"success": True, "message": "Ceramic Basin removed from cart"}

    cart = (await client.get("/api/cart")).json()
    assert cart["items"] == []
    assert cart["items_price"] == "0.00"


@pytest.mark.asyncio
async def test_rejections_come_back_as_messages(client, product, make_line):
    await client.post("/api/cart/add", json=make_line(product, qty=2))

    response = await client.put("/api/cart/update", json={"product_id": product.id, "quantity": 0})

    assert response.status_code == 200
    assert response.json() == {"success": False, "message": "Quantity must be greater than 0"}
    assert "HX-Trigger" not in response.headers

    response = await client.post("/api/cart/add", json=make_line(product, qty=4))
    assert response.json() == {"success": False, "message": "Only 5 items available in stock"}


@pytest.mark.asyncio
async def test_malformed_item(client, product, make_line):
    line = make_line(product)
    del line["image"]

    response = await client.post("/api/cart/add", json=line)

    assert response.status_code == 200
    assert response.json()["success"] is False
    assert "image" in response.json()["message"]


@pytest.mark.asyncio
async def test_carts_are_per_session(client, product, make_line):
    await client.post("/api/cart/add", json=make_line(product))

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver") as stranger:
        response = await stranger.get("/api/cart")

    assert response.json() is None
