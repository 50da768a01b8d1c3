"""
Tests for product endpoints and price statistics.
"""
from datetime import date
from decimal import Decimal

D = Decimal


def test_create_product(client, operator_headers):
    response = client.post(
        "/api/products", json={"name": "Onion", "category": "Vegetable", "default_unit_price": "18.50"},
        headers=operator_headers
    )
    assert response.status_code == 201
    assert response.json()["unit"] == "kg"
    assert response.json()["average_price"] is None


def test_create_product_duplicate_name(client, operator_headers, product):
    response = client.post("/api/products", json={"name": "tomato"}, headers=operator_headers)
    assert response.status_code == 422


def test_update_product(client, operator_headers, product):
    response = client.patch(f"/api/products/{product.id}", json={"default_unit_price": "22"}, headers=operator_headers)
    assert response.status_code == 200
    assert D(response.json()["default_unit_price"]) == D("22")
    assert response.json()["name"] == "Tomato"


def test_update_product_rejects_null_active_flag(client, operator_headers, product):
    response = client.patch(f"/api/products/{product.id}", json={"active": None}, headers=operator_headers)
    assert response.status_code == 422
    assert "error" in response.json()

    response = client.get(f"/api/products/{product.id}", headers=operator_headers)
    assert response.json()["active"] is True


def test_delete_product(client, admin_headers, product):
    assert client.delete(f"/api/products/{product.id}", headers=admin_headers).status_code == 204
    assert client.get(f"/api/products/{product.id}", headers=admin_headers).status_code == 404


def test_delete_sold_product_is_refused(client, admin_headers, record, product):
    record("10", "20")
    assert client.delete(f"/api/products/{product.id}", headers=admin_headers).status_code == 422


def test_refresh_price_statistics(client, operator_headers, record, product):
    record("10", "20", on=date(2024, 1, 1))
    record("5", "22", on=date(2024, 1, 2))
    record("5", "22", on=date(2024, 1, 3))
    record("2", "24", on=date(2024, 1, 4))

    response = client.post(f"/api/products/{product.id}/refresh-stats", headers=operator_headers)
    assert response.status_code == 200
    body = response.json()

    assert D(body["average_price"]) == D("22")
    assert D(body["min_price"]) == D("20")
    assert D(body["max_price"]) == D("24")
    assert D(body["median_price"]) == D("22")
    assert D(body["mode_price"]) == D("22")
    assert D(body["last_unit_price_sold"]) == D("24")
    assert D(body["total_quantity_sold_kg"]) == D("22")


def test_refresh_price_statistics_skips_cancelled(client, admin_headers, record, product):
    kept = record("10", "20")
    cancelled = record("10", "40")
    client.patch("/api/transactions/batch", json={"ids": [cancelled.id], "status": "cancelled"}, headers=admin_headers)

    body = client.post(f"/api/products/{product.id}/refresh-stats", headers=admin_headers).json()
    assert D(body["max_price"]) == D("20")
    assert kept.id != cancelled.id


def test_batch_deactivate_and_list_active(client, admin_headers, operator_headers, product):
    onion = client.post("/api/products", json={"name": "Onion"}, headers=operator_headers).json()

    response = client.patch("/api/products/batch", json={"ids": [onion["id"]], "active": False}, headers=admin_headers)
    assert response.json() == {"updated_count": 1}

    names = [p["name"] for p in client.get("/api/products", params={"active_only": True}, headers=admin_headers).json()]
    assert names == ["Tomato"]
    assert len(client.get("/api/products", headers=admin_headers).json()) == 2
