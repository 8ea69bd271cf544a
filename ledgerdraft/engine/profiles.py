"""Per-document-type configuration shared by numbering, validation and submission."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional

from ..models.base import DocumentType


@dataclass(frozen=True)
class DocumentProfile:
    document_type: DocumentType
    prefix: str
    with_millis: bool
    min_lines: int
    endpoint: str
    number_field: str
    date_field: str
    party_field: Optional[str] = None
    lines_field: str = "items"
    ledger: bool = False  # 借贷驱动（凭证）还是数量/单价驱动（订单）
    require_unit_price: bool = False
    require_party: bool = False
    date_as_datetime: bool = False  # 订单日期以完整时间戳发送
    # 出站报文结构：order 平铺（销售订单）、order_envelope 即 {order, items}（采购订单）、
    # note 使用 *_base 金额字段（贷项/借项通知单）
    payload_shape: str = "order"


_VOUCHER_ENDPOINT = "/api/v1/account/vouchers"


def _ledger_profile(document_type: DocumentType, require_party: bool = False) -> DocumentProfile:
    return DocumentProfile(
        document_type=document_type,
        prefix="V",
        with_millis=True,
        min_lines=2,
        endpoint=_VOUCHER_ENDPOINT,
        number_field="voucher_number",
        date_field="date",
        party_field="party_account_id",
        lines_field="lines",
        ledger=True,
        require_party=require_party,
    )


PROFILES: Dict[DocumentType, DocumentProfile] = {
    DocumentType.JOURNAL: _ledger_profile(DocumentType.JOURNAL),
    DocumentType.PAYMENT: _ledger_profile(DocumentType.PAYMENT, require_party=True),
    DocumentType.RECEIPT: _ledger_profile(DocumentType.RECEIPT, require_party=True),
    DocumentType.CONTRA_VOUCHER: _ledger_profile(DocumentType.CONTRA_VOUCHER),
    DocumentType.CONTRA: DocumentProfile(
        document_type=DocumentType.CONTRA,
        prefix="CNT",
        with_millis=False,
        min_lines=0,
        endpoint="/api/v1/account/contra",
        number_field="voucher_number",
        date_field="date",
        lines_field="",
    ),
    DocumentType.PURCHASE_ORDER: DocumentProfile(
        document_type=DocumentType.PURCHASE_ORDER,
        prefix="PO",
        with_millis=True,
        min_lines=1,
        endpoint="/api/v1/inventory/purchase-orders",
        number_field="po_number",
        date_field="order_date",
        party_field="supplier_id",
        date_as_datetime=True,
        payload_shape="order_envelope",
        require_party=True,
    ),
    DocumentType.SALES_ORDER: DocumentProfile(
        document_type=DocumentType.SALES_ORDER,
        prefix="SO",
        with_millis=True,
        min_lines=1,
        endpoint="/api/v1/inventory/sales-orders",
        number_field="so_number",
        date_field="order_date",
        party_field="customer_id",
        date_as_datetime=True,
        require_party=True,
    ),
    # credit notes share the CNT prefix with contra transfers; only the
    # millisecond suffix tells the two apart
    DocumentType.CREDIT_NOTE: DocumentProfile(
        document_type=DocumentType.CREDIT_NOTE,
        prefix="CNT",
        with_millis=True,
        min_lines=1,
        endpoint="/api/v1/account/credit-notes",
        number_field="note_number",
        date_field="note_date",
        party_field="customer_id",
        require_unit_price=True,
        payload_shape="note",
        require_party=True,
    ),
    DocumentType.DEBIT_NOTE: DocumentProfile(
        document_type=DocumentType.DEBIT_NOTE,
        prefix="DN",
        with_millis=True,
        min_lines=1,
        endpoint="/api/v1/account/debit-notes",
        number_field="note_number",
        date_field="note_date",
        party_field="supplier_id",
        require_unit_price=True,
        payload_shape="note",
        require_party=True,
    ),
}


def get_profile(document_type: DocumentType) -> DocumentProfile:
    """Return the profile for ``document_type``; raises ``KeyError`` when unknown."""
    try:
        return PROFILES[DocumentType(document_type)]
    except ValueError as exc:
        raise KeyError(document_type) from exc


__all__ = ["DocumentProfile", "PROFILES", "get_profile"]
