"""数据模型模块 - 单据草稿的核心数据结构

目录结构：
- base.py: 基础模型（BaseDocument、枚举类型、金额工具）
- document/: 单据相关模型（明细行、凭证、订单/通知单、Contra 划转）
- serialization.py: 序列化工具和出站报文构建
"""

# 基础模型
from .base import (
    BaseDocument,
    DocumentStatus,
    DocumentType,
    money,
    to_decimal,
)

# 单据模型
from .document import (
    ContraVoucher,
    LineItem,
    TradeDocument,
    Voucher,
    VoucherLine,
    split_gst_rate,
)

__all__ = [
    # 基础模型
    "DocumentType",
    "DocumentStatus",
    "BaseDocument",
    "money",
    "to_decimal",
    # 单据模型
    "LineItem",
    "split_gst_rate",
    "TradeDocument",
    "Voucher",
    "VoucherLine",
    "ContraVoucher",
]
