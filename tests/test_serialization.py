# tests/test_serialization.py
"""Tests for JSON helpers and outgoing request bodies."""

import json
from dataclasses import replace
from datetime import date
from decimal import Decimal

import pytest

from ledgerdraft.engine import validate
from ledgerdraft.models import (
    ContraVoucher,
    DocumentType,
    LineItem,
    TradeDocument,
    Voucher,
    VoucherLine,
    money,
    to_decimal,
)
from ledgerdraft.models.serialization import build_payload, from_dict, from_json, to_dict, to_json


class TestAmountHelpers:

    @pytest.mark.parametrize(
        "raw, expected",
        [
            (None, Decimal("0")),
            ("", Decimal("0")),
            ("₹1,250.50", Decimal("1250.50")),
            ("Rs. 99", Decimal("99")),
            (0.1, Decimal("0.1")),
            (12, Decimal("12")),
            ("abc", Decimal("0")),
            ("1e3", Decimal("1000")),
            ("2.5E-1", Decimal("0.25")),
            ("Total: 12.50", Decimal("12.50")),
            ("NaN", Decimal("0")),
        ],
    )
    def test_to_decimal(self, raw, expected):
        assert to_decimal(raw) == expected

    def test_money_rounds_half_up(self):
        assert money("2.005") == Decimal("2.01")
        assert money("2.004") == Decimal("2.00")


class TestPayloads:

    def test_voucher_payload(self, balanced_journal):
        voucher = replace(balanced_journal, description="Rent")
        payload = build_payload(voucher, validate(voucher), is_posted=True, client_reference="abc123")

        assert payload["voucher_type"] == "Journal"
        assert payload["voucher_number"] == "V-705032024140902123"
        assert payload["date"] == "2024-03-05"
        assert payload["total_amount"] == 500.0
        assert payload["is_posted"] is True
        assert payload["client_reference"] == "abc123"
        assert [line["debit"] for line in payload["lines"]] == [500.0, 0.0]
        assert [line["credit"] for line in payload["lines"]] == [0.0, 500.0]

    def test_voucher_payload_sends_valid_lines_only(self, balanced_journal):
        voucher = replace(balanced_journal, lines=balanced_journal.lines + [VoucherLine()])
        payload = build_payload(voucher, validate(voucher))

        assert len(payload["lines"]) == 2
        assert "client_reference" not in payload

    def test_sales_order_payload(self, purchase_order):
        order = replace(
            purchase_order,
            document_type=DocumentType.SALES_ORDER,
            document_number="SO-705032024140902123",
            header_discount_percent=10,
            roundoff="-0.50",
        )
        payload = build_payload(order, validate(order))

        assert payload["so_number"] == "SO-705032024140902123"
        assert payload["order_date"] == "2024-03-05T00:00:00"
        assert payload["customer_id"] == 11
        assert payload["subtotal_amount"] == 350.0
        assert payload["header_discount_amount"] == 35.0
        assert payload["net_amount"] == 314.5
        assert payload["status"] == "DRAFT"
        assert [item["product_id"] for item in payload["items"]] == [1, 2, 3]
        assert "reason" not in payload

    def test_purchase_order_payload_is_wrapped(self, purchase_order):
        order = replace(purchase_order, header_discount_percent=10, roundoff="-0.50")
        payload = build_payload(order, validate(order), client_reference="abc123")

        assert set(payload) == {"order", "items", "client_reference"}
        assert payload["order"] == {
            "po_number": "PO-705032024140902123",
            "supplier_id": 11,
            "order_date": "2024-03-05T00:00:00",
            "reference_number": "",
            "notes": "",
            "total_amount": 314.5,
            "discount_percent": 10.0,
            "discount_amount": 35.0,
            "roundoff": -0.5,
        }
        item = payload["items"][1]
        assert item["product_id"] == 2
        assert item["unit_price"] == 100.0
        assert item["total_amount"] == 200.0
        assert "taxable_amount" not in item

    def test_amounts_rounded_only_in_payload(self, purchase_order):
        order = replace(purchase_order, document_type=DocumentType.SALES_ORDER, lines=[
            LineItem(reference_id=1, quantity=3, unit_price="0.335", cgst_rate_percent=9, sgst_rate_percent=9),
        ])
        result = validate(order)
        payload = build_payload(order, result)

        # 1.005 taxable, kept exact until the body is built
        assert result.lines[0].taxable_amount == Decimal("1.005")
        assert payload["items"][0]["taxable_amount"] == 1.01

    @pytest.mark.parametrize(
        "document_type, party_field",
        [(DocumentType.CREDIT_NOTE, "customer_id"), (DocumentType.DEBIT_NOTE, "supplier_id")],
    )
    def test_note_payload_uses_base_amounts(self, purchase_order, document_type, party_field):
        note = replace(
            purchase_order,
            document_type=document_type,
            document_number="DN-705032024140902123",
            reason="Damaged goods",
            lines=[LineItem.for_product(7, 200, 18, quantity=2)],
        )
        payload = build_payload(note, validate(note))

        assert payload["note_number"] == "DN-705032024140902123"
        assert payload["note_date"] == "2024-03-05"
        assert payload[party_field] == 11
        assert payload["reason"] == "Damaged goods"
        assert payload["original_invoice_number"] is None
        assert payload["status"] == "POSTED"
        assert payload["subtotal_base"] == 400.0
        assert payload["cgst_amount_base"] == 36.0
        assert payload["sgst_amount_base"] == 36.0
        assert payload["igst_amount_base"] == 0.0
        assert payload["tax_amount_base"] == 72.0
        assert payload["total_amount_base"] == 472.0
        assert "net_amount" not in payload

        (item,) = payload["items"]
        assert item["unit_price_base"] == 200.0
        assert item["taxable_amount_base"] == 400.0
        assert item["total_amount_base"] == 472.0
        assert item["cgst_rate"] == 9.0

    def test_contra_payload(self):
        contra = ContraVoucher(
            document_number="CNT-705032024140902",
            document_date=date(2024, 3, 5),
            from_account_id=1,
            to_account_id=2,
            amount="1500.456",
        )
        payload = build_payload(contra, validate(contra))

        assert payload == {
            "voucher_number": "CNT-705032024140902",
            "date": "2024-03-05",
            "from_account_id": 1,
            "to_account_id": 2,
            "amount": 1500.46,
            "narration": "",
        }

    def test_invalid_document_has_no_payload(self, balanced_journal):
        voucher = replace(balanced_journal, document_number="")

        with pytest.raises(ValueError):
            build_payload(voucher, validate(voucher))


class TestRoundTrip:

    def test_to_dict_is_json_ready(self, purchase_order):
        data = to_dict(purchase_order)

        assert data["document_type"] == "PurchaseOrder"
        assert data["document_date"] == "2024-03-05"
        assert data["lines"][0]["unit_price"] == 100.0
        json.dumps(data)

    def test_from_dict_accepts_backend_field_names(self):
        document = from_dict(
            {
                "document_type": "SalesOrder",
                "document_number": "SO-1",
                "document_date": "2024-03-05T10:30:00Z",
                "party_id": "4",
                "items": [
                    {"product_id": 9, "quantity": "2", "unit_price": "10", "line_discount_percent": 5, "cgst_rate": 6},
                ],
            },
            TradeDocument,
        )

        assert document.document_type == DocumentType.SALES_ORDER
        assert document.document_date == date(2024, 3, 5)
        assert document.party_id == 4
        line = document.lines[0]
        assert line.reference_id == 9
        assert line.discount_percent == Decimal("5")
        assert line.cgst_rate_percent == Decimal("6")

    def test_voucher_json_round_trip(self, balanced_journal):
        restored = from_json(to_json(balanced_journal), Voucher)

        assert restored.document_number == balanced_journal.document_number
        assert [line.debit for line in restored.lines] == [Decimal("500"), Decimal("0")]
        assert restored.lines[1].account_id == 2

    def test_unsupported_target(self):
        with pytest.raises(ValueError):
            from_dict({}, dict)


def test_voucher_exchange_rate_is_decimal(balanced_journal):
    voucher = replace(balanced_journal, exchange_rate="1.5")

    assert voucher.exchange_rate == Decimal("1.5")
    assert build_payload(voucher, validate(voucher))["exchange_rate"] == 1.5
