# tests/test_catalog.py

from decimal import Decimal


def test_menu_lists_only_available_foods(client, menu):
    response = client.get("/catalog/menu")
    assert response.status_code == 200
    assert [food["name"] for food in response.json()] == ["Jollof", "Waakye"]


def test_inactive_category_hides_its_foods(client, admin_headers, menu):
    response = client.put(f"/catalog/categories/{menu['category']}", json={"is_active": False}, headers=admin_headers)
    assert response.status_code == 200
    assert response.json()["is_active"] is False
    assert client.get("/catalog/menu").json() == []


def test_create_food_requires_admin(client, menu):
    response = client.post("/catalog/foods", json={"name": "Kelewele", "price": "8.00"})
    assert response.status_code == 401


def test_negative_price_is_rejected(client, admin_headers):
    response = client.post("/catalog/foods", json={"name": "Kelewele", "price": "-1"}, headers=admin_headers)
    assert response.status_code == 422


def test_food_with_unknown_category(client, admin_headers):
    response = client.post(
        "/catalog/foods",
        json={"name": "Kelewele", "price": "8.00", "category_id": "missing"},
        headers=admin_headers,
    )
    assert response.status_code == 404


def test_update_and_toggle_food(client, admin_headers, menu):
    response = client.put(f"/catalog/foods/{menu['Waakye']}", json={"price": "11.50"}, headers=admin_headers)
    assert response.status_code == 200
    assert Decimal(str(response.json()["price"])) == Decimal("11.50")
    assert response.json()["name"] == "Waakye"

    toggled = client.post(f"/catalog/foods/{menu['Banku']}/toggle", headers=admin_headers)
    assert toggled.status_code == 200
    assert toggled.json()["is_available"] is True
    assert "Banku" in [food["name"] for food in client.get("/catalog/menu").json()]


def test_food_in_orders_cannot_be_deleted(client, admin_headers, menu, place_order):
    place_order()
    assert client.delete(f"/catalog/foods/{menu['Jollof']}", headers=admin_headers).status_code == 409
    assert client.delete(f"/catalog/foods/{menu['Waakye']}", headers=admin_headers).status_code == 204
    assert client.get(f"/catalog/foods/{menu['Waakye']}").status_code == 404


def test_deleting_category_keeps_foods(client, admin_headers, menu):
    assert client.delete(f"/catalog/categories/{menu['category']}", headers=admin_headers).status_code == 204

    food = client.get(f"/catalog/foods/{menu['Jollof']}").json()
    assert food["category_id"] is None
    assert [food["name"] for food in client.get("/catalog/menu").json()] == ["Jollof", "Waakye"]


def test_null_for_required_fields_is_rejected(client, admin_headers, menu):
    for field in ("price", "name", "delivery_price", "is_available"):
        response = client.put(f"/catalog/foods/{menu['Jollof']}", json={field: None}, headers=admin_headers)
        assert response.status_code == 422, field

    for field in ("name", "is_active"):
        response = client.put(f"/catalog/categories/{menu['category']}", json={field: None}, headers=admin_headers)
        assert response.status_code == 422, field

    food = client.get(f"/catalog/foods/{menu['Jollof']}").json()
    assert Decimal(str(food["price"])) == Decimal("15.00")


def test_nullable_fields_can_be_cleared(client, admin_headers, menu):
    response = client.put(
        f"/catalog/foods/{menu['Jollof']}",
        json={"description": None, "category_id": None},
        headers=admin_headers,
    )
    assert response.status_code == 200
    assert response.json()["category_id"] is None
