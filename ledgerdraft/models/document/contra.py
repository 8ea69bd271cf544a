"""Contra 划转单 - 同一主体的现金/银行账户之间转账"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from ..base import ZERO, BaseDocument, DocumentType, to_decimal


@dataclass
class ContraVoucher(BaseDocument):
    """单笔资金划转（转出账户 -> 转入账户）"""

    document_type: DocumentType = DocumentType.CONTRA
    from_account_id: Optional[int] = None  # 转出账户
    to_account_id: Optional[int] = None  # 转入账户
    amount: Decimal = ZERO
    narration: str = ""

    def __post_init__(self) -> None:
        self.amount = to_decimal(self.amount)


__all__ = ["ContraVoucher"]
