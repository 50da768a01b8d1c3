"""
Tests for kisan and vyapari endpoints.
"""
from decimal import Decimal
from mandi.models.party import Kisan, Vyapari

D = Decimal


def test_create_kisan(client, operator_headers):
    response = client.post(
        "/api/kisans",
        json={"name": "  Ramesh ", "village": "Rampur", "contact_number": "9876543210"},
        headers=operator_headers
    )
    assert response.status_code == 201
    body = response.json()
    assert body["name"] == "Ramesh"
    assert D(body["bakaya"]) == 0
    assert body["crops_sold"] == []


def test_create_kisan_rejects_bad_phone(client, operator_headers):
    response = client.post("/api/kisans", json={"name": "Ramesh", "contact_number": "98765-abc"}, headers=operator_headers)
    assert response.status_code == 422


def test_create_vyapari(client, operator_headers):
    response = client.post(
        "/api/vyaparis", json={"name": "Gupta Traders", "gst_number": "23ABCDE1234F1Z5"}, headers=operator_headers
    )
    assert response.status_code == 201
    assert response.json()["crops_bought"] == []


def test_list_kisans_search(client, viewer_headers, operator_headers):
    for name in ["Ramesh", "Suresh", "Mahesh"]:
        client.post("/api/kisans", json={"name": name}, headers=operator_headers)

    response = client.get("/api/kisans", params={"search": "esh"}, headers=viewer_headers)
    assert [k["name"] for k in response.json()] == ["Mahesh", "Ramesh", "Suresh"]

    response = client.get("/api/kisans", params={"search": "sur"}, headers=viewer_headers)
    assert [k["name"] for k in response.json()] == ["Suresh"]


def test_update_kisan_is_sparse(client, operator_headers, kisan):
    response = client.patch(f"/api/kisans/{kisan.id}", json={"district": "Indore"}, headers=operator_headers)
    assert response.status_code == 200
    assert response.json()["district"] == "Indore"
    assert response.json()["village"] == "Rampur"
    assert response.json()["name"] == "Ramesh"


def test_update_kisan_rejects_null_for_required_fields(client, operator_headers, kisan):
    for field in ("is_anonymous", "name"):
        response = client.patch(f"/api/kisans/{kisan.id}", json={field: None}, headers=operator_headers)
        assert response.status_code == 422, field
        assert "error" in response.json()


def test_update_vyapari_rejects_null_anonymous_flag(client, operator_headers, vyapari):
    response = client.patch(f"/api/vyaparis/{vyapari.id}", json={"is_anonymous": None}, headers=operator_headers)
    assert response.status_code == 422


def test_get_unknown_kisan(client, viewer_headers):
    response = client.get("/api/kisans/9999", headers=viewer_headers)
    assert response.status_code == 404
    assert response.json() == {"error": "Kisan with ID 9999 not found"}


def test_delete_unreferenced_kisan(client, admin_headers, kisan):
    assert client.delete(f"/api/kisans/{kisan.id}", headers=admin_headers).status_code == 204
    assert client.get(f"/api/kisans/{kisan.id}", headers=admin_headers).status_code == 404


def test_delete_referenced_vyapari_is_refused(client, admin_headers, record, vyapari):
    record("10", "20")
    response = client.delete(f"/api/vyaparis/{vyapari.id}", headers=admin_headers)
    assert response.status_code == 422


def test_operator_cannot_delete(client, operator_headers, kisan):
    assert client.delete(f"/api/kisans/{kisan.id}", headers=operator_headers).status_code == 403


def test_batch_update_kisans(client, admin_headers, operator_headers):
    ids = [
        client.post("/api/kisans", json={"name": name}, headers=operator_headers).json()["id"]
        for name in ["Ramesh", "Suresh"]
    ]

    response = client.patch("/api/kisans/batch", json={"ids": ids, "village": "Rampur"}, headers=admin_headers)
    assert response.status_code == 200
    assert response.json() == {"updated_count": 2}
    assert {k["village"] for k in client.get("/api/kisans", headers=admin_headers).json()} == {"Rampur"}


def test_batch_update_vyaparis_unknown_id(client, admin_headers, vyapari):
    response = client.patch(
        "/api/vyaparis/batch", json={"ids": [vyapari.id, 9999], "city": "Dewas"}, headers=admin_headers
    )
    assert response.status_code == 404


def test_batch_update_requires_admin(client, operator_headers, kisan):
    response = client.patch("/api/kisans/batch", json={"ids": [kisan.id], "village": "X"}, headers=operator_headers)
    assert response.status_code == 403


def test_recalculate_balances_corrects_drift(client, admin_headers, operator_headers, record, kisan, vyapari, db):
    record("50", "20", paid_kisan="100")
    client.post(
        "/api/payments",
        json={"entity_type": "vyapari", "entity_id": vyapari.id, "amount": "20", "payment_date": "2024-01-02"},
        headers=operator_headers
    )
    db.query(Kisan).filter(Kisan.id == kisan.id).update({Kisan.bakaya: D("1")})
    db.commit()

    response = client.post("/api/kisans/recalculate-balances", headers=admin_headers)
    assert response.status_code == 200
    body = response.json()
    assert body["parties_checked"] == 2
    assert len(body["drifted"]) == 1
    drift = body["drifted"][0]
    assert drift["entity_type"] == "kisan"
    assert D(drift["cached_bakaya"]) == D("1")
    assert D(drift["derived_bakaya"]) == D("880")

    assert D(client.get(f"/api/kisans/{kisan.id}", headers=admin_headers).json()["bakaya"]) == D("880")
    db.expire_all()
    assert db.query(Vyapari).filter(Vyapari.id == vyapari.id).one().bakaya == D("1000")
