"""基础模型 - 单据草稿的基础数据结构、枚举类型和金额工具"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import date
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from enum import Enum
from typing import Any, Optional

ZERO = Decimal("0")
HUNDRED = Decimal("100")
CENT = Decimal("0.01")

_AMOUNT_PATTERN = re.compile(r"[-+]?\d+(?:\.\d+)?")


class DocumentType(str, Enum):
    """单据类型（值与后端 voucher_type / 单据种类保持一致）"""
    JOURNAL = "Journal"
    PAYMENT = "Payment"
    RECEIPT = "Receipt"
    CONTRA_VOUCHER = "Contra"  # 通过凭证表单录入的多行 Contra 凭证
    CONTRA = "ContraTransfer"  # 现金/银行账户之间的单笔划转
    PURCHASE_ORDER = "PurchaseOrder"
    SALES_ORDER = "SalesOrder"
    CREDIT_NOTE = "CreditNote"
    DEBIT_NOTE = "DebitNote"

    @property
    def is_ledger(self) -> bool:
        return self in LEDGER_TYPES

    @property
    def is_trade(self) -> bool:
        return self in TRADE_TYPES


LEDGER_TYPES = frozenset(
    {
        DocumentType.JOURNAL,
        DocumentType.PAYMENT,
        DocumentType.RECEIPT,
        DocumentType.CONTRA_VOUCHER,
    }
)

TRADE_TYPES = frozenset(
    {
        DocumentType.PURCHASE_ORDER,
        DocumentType.SALES_ORDER,
        DocumentType.CREDIT_NOTE,
        DocumentType.DEBIT_NOTE,
    }
)


class DocumentStatus(str, Enum):
    """草稿状态"""
    DRAFT = "DRAFT"
    SUBMITTED = "SUBMITTED"


def to_decimal(value: Any) -> Decimal:
    """将输入金额/数量规范化为 Decimal

    空值和无法解析的字符串按 0 处理；字符串中的货币符号和千分位逗号会被去掉。
    float 先转成 str，避免 0.1 变成 0.1000000000000000055...
    """
    if value is None:
        return ZERO
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool):
        return Decimal(int(value))
    if isinstance(value, int):
        return Decimal(value)
    if isinstance(value, float):
        try:
            return Decimal(str(value))
        except InvalidOperation:
            return ZERO
    if isinstance(value, str):
        cleaned = value.replace("₹", "").replace("Rs.", "").replace(",", "").strip()
        if not cleaned:
            return ZERO
        try:
            parsed = Decimal(cleaned)
        except InvalidOperation:
            parsed = None
        if parsed is not None and parsed.is_finite():
            return parsed
        # 带文字的金额（如 "合计 12.50"）取第一个数字
        match = _AMOUNT_PATTERN.search(cleaned)
        if match:
            return Decimal(match.group())
        return ZERO
    raise TypeError(f"Cannot convert {type(value).__name__} to Decimal")


def money(value: Any) -> Decimal:
    """保留两位小数（四舍五入），仅用于展示和出站报文"""
    return to_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def to_optional_int(value: Any) -> Optional[int]:
    """下拉框选中值 -> 整数ID，未选择（None/0/空串）返回 None"""
    if value in (None, "", 0, "0"):
        return None
    return int(value)


@dataclass
class BaseDocument:
    """所有单据草稿的基础数据结构（通用字段）"""

    document_type: DocumentType = DocumentType.JOURNAL
    document_number: str = ""  # 客户端生成的草稿编号
    document_date: Optional[date] = field(default_factory=date.today)
    server_number: Optional[str] = None  # 提交成功后由后端分配的编号
    status: DocumentStatus = DocumentStatus.DRAFT

    @property
    def is_submitted(self) -> bool:
        return self.status == DocumentStatus.SUBMITTED


__all__ = [
    "CENT",
    "HUNDRED",
    "ZERO",
    "DocumentType",
    "DocumentStatus",
    "BaseDocument",
    "LEDGER_TYPES",
    "TRADE_TYPES",
    "money",
    "to_decimal",
    "to_optional_int",
]
