"""商品明细行 - 订单、贷项/借项通知单共用"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Any, Dict, Optional

from ..base import ZERO, to_decimal

_DECIMAL_FIELDS = (
    "quantity",
    "free_quantity",
    "unit_price",
    "discount_percent",
    "cgst_rate_percent",
    "sgst_rate_percent",
    "igst_rate_percent",
    "cess_rate_percent",
    "mrp",
    "discount_amount",
    "taxable_amount",
    "cgst_amount",
    "sgst_amount",
    "igst_amount",
    "cess_amount",
    "total_tax_amount",
    "line_total",
)


def split_gst_rate(gst_rate: Any, inter_state: bool = False) -> Dict[str, Decimal]:
    """Split a combined GST rate into its components.

    Intra-state supplies carry CGST and SGST at half the rate each;
    inter-state supplies carry the whole rate as IGST.
    """
    rate = to_decimal(gst_rate)
    if inter_state:
        return {
            "cgst_rate_percent": ZERO,
            "sgst_rate_percent": ZERO,
            "igst_rate_percent": rate,
        }
    half = rate / 2
    return {
        "cgst_rate_percent": half,
        "sgst_rate_percent": half,
        "igst_rate_percent": ZERO,
    }


@dataclass
class LineItem:
    """单据明细行（派生金额字段由 engine.calculator 计算，不直接编辑）"""

    reference_id: int = 0  # 商品ID，>0 才视为有效行
    line_no: int = 1  # 行号（删除行后重新编号）
    quantity: Decimal = ZERO  # 数量
    free_quantity: Decimal = ZERO  # 赠品数量，不计价
    unit_price: Decimal = ZERO  # 单价
    discount_percent: Decimal = ZERO  # 行折扣 %
    cgst_rate_percent: Decimal = ZERO
    sgst_rate_percent: Decimal = ZERO
    igst_rate_percent: Decimal = ZERO  # 跨邦交易
    cess_rate_percent: Decimal = ZERO

    # 描述性字段，原样透传给后端
    product_name: str = ""
    hsn_code: str = ""
    batch_number: str = ""
    mrp: Decimal = ZERO
    expiry_date: Optional[date] = None
    description: str = ""

    # 派生字段
    discount_amount: Decimal = ZERO
    taxable_amount: Decimal = ZERO
    cgst_amount: Decimal = ZERO
    sgst_amount: Decimal = ZERO
    igst_amount: Decimal = ZERO
    cess_amount: Decimal = ZERO
    total_tax_amount: Decimal = ZERO
    line_total: Decimal = ZERO

    def __post_init__(self) -> None:
        for name in _DECIMAL_FIELDS:
            setattr(self, name, to_decimal(getattr(self, name)))
        self.reference_id = int(self.reference_id or 0)

    @property
    def tax_rate_percent(self) -> Decimal:
        """合计税率（CGST + SGST + IGST，不含 CESS）"""
        return self.cgst_rate_percent + self.sgst_rate_percent + self.igst_rate_percent

    @classmethod
    def for_product(
        cls,
        product_id: int,
        unit_price: Any,
        gst_rate: Any = 0,
        *,
        quantity: Any = 1,
        inter_state: bool = False,
        **extra: Any,
    ) -> "LineItem":
        """根据商品资料创建明细行，并拆分 GST 税率"""
        return cls(
            reference_id=product_id,
            quantity=quantity,
            unit_price=unit_price,
            **split_gst_rate(gst_rate, inter_state=inter_state),
            **extra,
        )


__all__ = ["LineItem", "split_gst_rate"]
