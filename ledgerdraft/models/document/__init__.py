"""单据模型模块 - 各类单据草稿的结构化数据定义"""

from .contra import ContraVoucher
from .line_item import LineItem, split_gst_rate
from .trade import TradeDocument
from .voucher import Voucher, VoucherLine

__all__ = [
    # 商品明细
    "LineItem",
    "split_gst_rate",
    # 订单/通知单
    "TradeDocument",
    # 记账凭证
    "Voucher",
    "VoucherLine",
    # 资金划转
    "ContraVoucher",
]
