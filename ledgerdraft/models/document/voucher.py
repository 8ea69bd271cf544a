"""记账凭证模型 - Journal / Payment / Receipt / Contra"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import List, Optional

from ..base import ZERO, BaseDocument, DocumentType, to_decimal


@dataclass
class VoucherLine:
    """凭证分录行

    借方和贷方一般只有一方非零，但模型本身不强制。
    """
    account_id: Optional[int] = None  # 会计科目ID
    debit: Decimal = ZERO  # 借方
    credit: Decimal = ZERO  # 贷方
    description: str = ""
    gst_rate_percent: Decimal = ZERO
    gst_amount: Decimal = ZERO
    cost_center_id: Optional[int] = None  # 成本中心

    def __post_init__(self) -> None:
        self.debit = to_decimal(self.debit)
        self.credit = to_decimal(self.credit)
        self.gst_rate_percent = to_decimal(self.gst_rate_percent)
        self.gst_amount = to_decimal(self.gst_amount)

    @property
    def is_valid(self) -> bool:
        """已选科目且借方或贷方有金额"""
        return bool(self.account_id) and (self.debit > 0 or self.credit > 0)

    @property
    def is_two_sided(self) -> bool:
        return self.debit != 0 and self.credit != 0


@dataclass
class Voucher(BaseDocument):
    """多行记账凭证"""

    document_type: DocumentType = DocumentType.JOURNAL
    description: str = ""  # 摘要
    reference_number: str = ""  # 发票/账单号
    party_account_id: Optional[int] = None  # 往来单位科目（Payment/Receipt 必填）
    payment_method: str = ""
    cheque_number: str = ""
    cheque_date: str = ""
    bank_name: str = ""
    currency: str = "INR"
    exchange_rate: Decimal = Decimal("1")
    lines: List[VoucherLine] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.exchange_rate = to_decimal(self.exchange_rate)

    @property
    def voucher_type(self) -> str:
        return self.document_type.value


__all__ = ["Voucher", "VoucherLine"]
