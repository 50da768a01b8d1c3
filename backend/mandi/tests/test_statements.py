"""
Tests for bill statement, printing and daily summary endpoints.
"""
from datetime import date
from decimal import Decimal
from mandi.models.party import Kisan

D = Decimal


def test_kisan_bill_statement(client, viewer_headers, record, kisan):
    record("50", "20", on=date(2024, 1, 1), vyapari_rate="0")
    record("25", "20", on=date(2024, 1, 5), vyapari_rate="0")

    response = client.get(f"/api/bills/kisan/{kisan.id}", headers=viewer_headers)
    assert response.status_code == 200
    body = response.json()
    summary = body["summary"]

    assert body["entity_name"] == "Ramesh"
    assert body["entity_address"] == "Rampur"
    assert len(body["transactions"]) == 2
    assert D(summary["total_amount_to_kisan_gross"]) == D("1500")
    assert D(summary["total_commission"]) == D("30")
    assert D(summary["net_amount_change_in_period"]) == D("1470")
    assert summary["total_amount_from_vyapari_gross"] is None
    assert D(body["opening_balance"]) == 0
    assert D(body["current_bakaya"]) == D("1470")


def test_bill_statement_with_range(client, viewer_headers, operator_headers, record, kisan):
    record("10", "20", on=date(2023, 12, 20))
    record("50", "20", on=date(2024, 1, 1))
    record("15", "20", on=date(2024, 2, 10))
    client.post(
        "/api/payments",
        json={"entity_type": "kisan", "entity_id": kisan.id, "amount": "100", "payment_date": "2023-12-25"},
        headers=operator_headers
    )

    response = client.get(
        f"/api/bills/kisan/{kisan.id}",
        params={"start_date": "2024-01-01", "end_date": "2024-01-31"},
        headers=viewer_headers
    )
    body = response.json()
    # 196 before the period, less the 100 payment
    assert D(body["opening_balance"]) == D("96")
    assert [t["transaction_date"] for t in body["transactions"]] == ["2024-01-01"]
    assert D(body["summary"]["total_weight"]) == D("50")
    assert D(body["closing_balance"]) == D("1076")


def test_vyapari_bill_statement(client, viewer_headers, record, vyapari):
    record("100", "20", vyapari_rate="0.40", paid_vyapari="500")

    body = client.get(f"/api/bills/vyapari/{vyapari.id}", headers=viewer_headers).json()
    assert D(body["summary"]["total_amount_from_vyapari_gross"]) == D("2000")
    assert D(body["summary"]["total_cash_collected_from_vyapari"]) == D("500")
    assert D(body["summary"]["net_amount_change_in_period"]) == D("2040")
    assert body["entity_gst"] == "23ABCDE1234F1Z5"


def test_bill_statement_unknown_party(client, viewer_headers):
    response = client.get("/api/bills/kisan/9999", headers=viewer_headers)
    assert response.status_code == 404
    assert "error" in response.json()


def test_bill_statement_bad_entity_type(client, viewer_headers):
    assert client.get("/api/bills/farmer/1", headers=viewer_headers).status_code == 422


def test_bill_statement_inverted_range(client, viewer_headers, kisan):
    response = client.get(
        f"/api/bills/kisan/{kisan.id}",
        params={"start_date": "2024-02-01", "end_date": "2024-01-01"},
        headers=viewer_headers
    )
    assert response.status_code == 422


def test_bill_statement_reports_cached_balance(client, viewer_headers, record, kisan, db):
    record("50", "20", vyapari_rate="0")
    db.query(Kisan).filter(Kisan.id == kisan.id).update({Kisan.bakaya: D("5000")})
    db.commit()

    body = client.get(f"/api/bills/kisan/{kisan.id}", headers=viewer_headers).json()
    assert D(body["current_bakaya"]) == D("5000")
    assert D(body["closing_balance"]) == D("980")


def test_print_bill_numbers_increase(client, viewer_headers, record, kisan):
    record("50", "20")

    first = client.get(f"/api/bills/kisan/{kisan.id}/print", headers=viewer_headers)
    second = client.get(f"/api/bills/kisan/{kisan.id}/print", headers=viewer_headers)

    assert first.status_code == 200
    assert first.headers["content-type"].startswith("text/plain")
    assert "Bill No: 1" in first.text
    assert "Bill No: 2" in second.text
    assert "Kisan Bill: Ramesh" in first.text


def test_daily_summary(client, viewer_headers, record):
    record("50", "20", on=date(2024, 1, 1), paid_kisan="100")
    record("25", "20", on=date(2024, 1, 1))
    record("10", "20", on=date(2024, 1, 2))

    response = client.get("/api/summary/daily", params={"date": "2024-01-01"}, headers=viewer_headers)
    assert response.status_code == 200
    body = response.json()

    assert body["summary_date"] == "2024-01-01"
    assert body["total_transactions_count"] == 2
    assert D(body["total_weight_processed"]) == D("75")
    assert D(body["daily_collection_from_vyaparis"]) == D("1530")
    assert D(body["daily_payments_to_kisans"]) == D("100")
    # 880 + 490 + 196 owed to the kisan; 1020 + 510 + 204 owed by the vyapari
    assert D(body["total_mandi_owes_to_kisans"]) == D("1566")
    assert D(body["total_vyaparis_owe_to_mandi"]) == D("1734")
    assert D(body["net_mandi_balance"]) == D("168")


def test_daily_summary_weight_keeps_grams(client, viewer_headers, record):
    record("0.125", "20")
    record("0.250", "20")

    response = client.get("/api/summary/daily", params={"date": "2024-01-01"}, headers=viewer_headers)
    assert response.status_code == 200
    assert D(response.json()["total_weight_processed"]) == D("0.375")
