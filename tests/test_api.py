# tests/test_api.py
"""Tests for the draft computation endpoints."""

import pytest
from fastapi.testclient import TestClient

from ledgerdraft.server import app


@pytest.fixture
def client():
    return TestClient(app)


def test_root(client):
    assert client.get("/").json() == {"message": "Ledger Draft API is running"}


def test_recompute_line(client):
    response = client.post(
        "/api/lines/recompute",
        json={"reference_id": 1, "quantity": 10, "unit_price": 100, "discount_percent": 10, "gst_rate_percent": 18},
    )

    assert response.status_code == 200
    data = response.json()
    assert data["taxable_amount"] == 900
    assert data["cgst_amount"] == 81
    assert data["line_total"] == 1062


def test_totals(client):
    response = client.post(
        "/api/totals",
        json={
            "lines": [
                {"reference_id": 1, "quantity": 1, "unit_price": 100},
                {"reference_id": 2, "quantity": 1, "unit_price": 200},
                {"reference_id": 3, "quantity": 1, "unit_price": 50},
            ],
            "header_discount_percent": 10,
            "roundoff": -0.5,
        },
    )

    data = response.json()
    assert data["subtotal"] == 350
    assert data["discount_amount"] == 35
    assert data["final_total"] == 314.5


def test_unbalanced_voucher(client):
    response = client.post(
        "/api/vouchers/validate",
        json={
            "document_type": "Journal",
            "document_number": "V-1",
            "document_date": "2024-03-05",
            "lines": [{"account_id": 1, "debit": 500}, {"account_id": 2, "credit": 499}],
        },
    )

    assert response.status_code == 200
    data = response.json()
    assert data["ok"] is False
    assert data["issue"]["code"] == "UnbalancedEntry"


def test_voucher_endpoint_rejects_order_type(client):
    response = client.post("/api/vouchers/validate", json={"document_type": "PurchaseOrder"})

    assert response.status_code == 400


def test_contra_same_account(client):
    response = client.post(
        "/api/contra/validate",
        json={
            "document_number": "CNT-1",
            "document_date": "2024-03-05",
            "from_account_id": 4,
            "to_account_id": 4,
            "amount": 100,
        },
    )

    assert response.json()["issue"]["code"] == "SameAccount"


def test_missing_party_category(client):
    response = client.post(
        "/api/trade-documents/validate",
        json={
            "document_type": "SalesOrder",
            "document_number": "SO-1",
            "document_date": "2024-03-05",
            "lines": [{"reference_id": 1, "quantity": 1, "unit_price": 10}],
        },
    )

    issue = response.json()["issue"]
    assert issue["code"] == "MissingParty"
    assert issue["category"] == "MissingRequiredField"
    assert issue["field"] == "customer_id"


def test_trade_payload_preview(client):
    response = client.post(
        "/api/trade-documents/payload",
        json={
            "document_type": "SalesOrder",
            "document_number": "SO-1",
            "document_date": "2024-03-05",
            "party_id": 11,
            "lines": [{"reference_id": 1, "quantity": 2, "unit_price": 100, "gst_rate_percent": 12, "inter_state": True}],
        },
    )

    assert response.status_code == 200
    data = response.json()
    assert data["so_number"] == "SO-1"
    assert data["customer_id"] == 11
    assert data["items"][0]["igst_amount"] == 24.0
    assert data["net_amount"] == 224.0


def test_trade_payload_preview_invalid(client):
    response = client.post(
        "/api/trade-documents/payload",
        json={"document_type": "PurchaseOrder", "document_number": "PO-1", "document_date": "2024-03-05"},
    )

    assert response.status_code == 422
    assert response.json()["detail"]["code"] == "MissingParty"


def test_document_number(client):
    response = client.post(
        "/api/document-numbers",
        json={"document_type": "PurchaseOrder", "tenant_id": 7, "at": "2024-03-05T14:09:02.123000"},
    )

    assert response.json() == {"document_type": "PurchaseOrder", "document_number": "PO-705032024140902123"}


def test_document_number_keeps_explicit_tenant_zero(client):
    response = client.post(
        "/api/document-numbers",
        json={"document_type": "DebitNote", "tenant_id": 0, "at": "2024-03-05T14:09:02.123000"},
    )

    assert response.json()["document_number"] == "DN-005032024140902123"
