"""业务单据模型 - 采购订单、销售订单、贷项通知单、借项通知单"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import List, Optional

from ..base import ZERO, BaseDocument, DocumentType, to_decimal
from .line_item import LineItem


@dataclass
class TradeDocument(BaseDocument):
    """表头 + 商品明细行结构的单据"""

    document_type: DocumentType = DocumentType.PURCHASE_ORDER
    party_id: Optional[int] = None  # 供应商或客户ID
    header_discount_percent: Decimal = ZERO  # 整单折扣 %
    roundoff: Decimal = ZERO  # 抹零调整
    reference_number: str = ""
    notes: str = ""

    # 仅贷项/借项通知单使用
    reason: str = ""
    original_invoice_number: str = ""

    lines: List[LineItem] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.header_discount_percent = to_decimal(self.header_discount_percent)
        self.roundoff = to_decimal(self.roundoff)


__all__ = ["TradeDocument"]
