# tests/conftest.py
"""
Shared pytest fixtures.

Network calls never leave the process: clients are built on
``httpx.MockTransport`` and settings point the session file at ``tmp_path``.
"""

from datetime import date, datetime
from decimal import Decimal

import pytest

from ledgerdraft.config import Settings
from ledgerdraft.models import DocumentType, LineItem, TradeDocument, Voucher, VoucherLine


@pytest.fixture
def fixed_now():
    """2024-03-05 14:09:02.123"""
    return datetime(2024, 3, 5, 14, 9, 2, 123000)


@pytest.fixture
def settings(tmp_path):
    return Settings(
        base_url="http://backend.test",
        api_token="secret-token",
        tenant_id=7,
        http_timeout=5.0,
        balance_tolerance=Decimal("0.01"),
        token_file=tmp_path / "session.json",
    )


@pytest.fixture
def balanced_journal():
    return Voucher(
        document_type=DocumentType.JOURNAL,
        document_number="V-705032024140902123",
        document_date=date(2024, 3, 5),
        lines=[
            VoucherLine(account_id=1, debit=500),
            VoucherLine(account_id=2, credit=500),
        ],
    )


@pytest.fixture
def purchase_order():
    return TradeDocument(
        document_type=DocumentType.PURCHASE_ORDER,
        document_number="PO-705032024140902123",
        document_date=date(2024, 3, 5),
        party_id=11,
        lines=[
            LineItem(reference_id=1, line_no=1, quantity=1, unit_price=100),
            LineItem(reference_id=2, line_no=2, quantity=2, unit_price=100),
            LineItem(reference_id=3, line_no=3, quantity=1, unit_price=50),
        ],
    )
