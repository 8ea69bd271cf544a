"""序列化工具 - JSON编解码和出站报文构建"""

from __future__ import annotations

import json
from dataclasses import asdict, is_dataclass
from datetime import date, datetime, time
from decimal import Decimal
from enum import Enum
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Type, TypeVar

from .base import DocumentStatus, DocumentType, money, to_decimal, to_optional_int
from .document import ContraVoucher, LineItem, TradeDocument, Voucher, VoucherLine

if TYPE_CHECKING:
    from ..engine.profiles import DocumentProfile
    from ..engine.validation import ValidationResult

T = TypeVar("T")


# ==================== JSON编码器 ====================

class DocumentJSONEncoder(json.JSONEncoder):
    """自定义JSON编码器，处理dataclass、Decimal、日期、Enum等类型"""

    def default(self, obj: Any) -> Any:
        if isinstance(obj, Decimal):
            return float(obj)
        elif isinstance(obj, (datetime, date)):
            return obj.isoformat()
        elif isinstance(obj, Enum):
            return obj.value
        elif is_dataclass(obj):
            return asdict(obj)
        return super().default(obj)


# ==================== 序列化函数 ====================

def to_dict(obj: Any) -> Dict[str, Any]:
    """将dataclass对象转换为可直接 json.dumps 的字典"""
    if not is_dataclass(obj):
        raise TypeError(f"Expected dataclass, got {type(obj)}")
    return json.loads(to_json(obj, indent=None))


def to_json(obj: Any, indent: Optional[int] = 2) -> str:
    """将对象序列化为JSON字符串"""
    return json.dumps(obj, cls=DocumentJSONEncoder, ensure_ascii=False, indent=indent)


# ==================== 反序列化函数 ====================

def _parse_date(value: Any) -> Optional[date]:
    """解析 ISO 日期（也接受带时间的字符串，只取日期部分）"""
    if value in (None, ""):
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        cleaned = value.strip().rstrip("Z")
        try:
            return datetime.fromisoformat(cleaned).date()
        except ValueError:
            return date.fromisoformat(cleaned[:10])
    raise ValueError(f"Cannot parse date from {type(value)}")


def from_dict_line_item(data: Dict[str, Any]) -> LineItem:
    """从字典创建LineItem对象（也接受后端的 product_id / *_rate 字段名）"""
    return LineItem(
        reference_id=data.get("reference_id", data.get("product_id")) or 0,
        line_no=int(data.get("line_no") or 1),
        quantity=data.get("quantity"),
        free_quantity=data.get("free_quantity"),
        unit_price=data.get("unit_price"),
        discount_percent=data.get("discount_percent", data.get("line_discount_percent")),
        cgst_rate_percent=data.get("cgst_rate_percent", data.get("cgst_rate")),
        sgst_rate_percent=data.get("sgst_rate_percent", data.get("sgst_rate")),
        igst_rate_percent=data.get("igst_rate_percent", data.get("igst_rate")),
        cess_rate_percent=data.get("cess_rate_percent", data.get("cess_rate")),
        product_name=data.get("product_name") or "",
        hsn_code=data.get("hsn_code") or "",
        batch_number=data.get("batch_number") or "",
        mrp=data.get("mrp"),
        expiry_date=_parse_date(data.get("expiry_date")),
        description=data.get("description") or "",
    )


def from_dict_voucher_line(data: Dict[str, Any]) -> VoucherLine:
    """从字典创建VoucherLine对象"""
    return VoucherLine(
        account_id=to_optional_int(data.get("account_id")),
        debit=data.get("debit"),
        credit=data.get("credit"),
        description=data.get("description") or "",
        gst_rate_percent=data.get("gst_rate_percent", data.get("gst_rate")),
        gst_amount=data.get("gst_amount"),
        cost_center_id=to_optional_int(data.get("cost_center_id")),
    )


def _base_fields(data: Dict[str, Any], default_type: DocumentType) -> Dict[str, Any]:
    fields: Dict[str, Any] = {
        "document_type": DocumentType(data.get("document_type") or default_type),
        "document_number": data.get("document_number") or "",
        "document_date": _parse_date(data.get("document_date")),
        "server_number": data.get("server_number"),
    }
    if data.get("status"):
        fields["status"] = DocumentStatus(data["status"])
    return fields


def from_dict_voucher(data: Dict[str, Any]) -> Voucher:
    """从字典创建Voucher对象"""
    return Voucher(
        **_base_fields(data, DocumentType.JOURNAL),
        description=data.get("description") or "",
        reference_number=data.get("reference_number") or "",
        party_account_id=to_optional_int(data.get("party_account_id")),
        payment_method=data.get("payment_method") or "",
        cheque_number=data.get("cheque_number") or "",
        cheque_date=data.get("cheque_date") or "",
        bank_name=data.get("bank_name") or "",
        currency=data.get("currency") or "INR",
        exchange_rate=to_decimal(data.get("exchange_rate", 1)),
        lines=[from_dict_voucher_line(line) for line in data.get("lines", [])],
    )


def from_dict_trade_document(data: Dict[str, Any]) -> TradeDocument:
    """从字典创建TradeDocument对象"""
    return TradeDocument(
        **_base_fields(data, DocumentType.PURCHASE_ORDER),
        party_id=to_optional_int(data.get("party_id")),
        header_discount_percent=data.get("header_discount_percent"),
        roundoff=data.get("roundoff"),
        reference_number=data.get("reference_number") or "",
        notes=data.get("notes") or "",
        reason=data.get("reason") or "",
        original_invoice_number=data.get("original_invoice_number") or "",
        lines=[from_dict_line_item(line) for line in data.get("lines", data.get("items", []))],
    )


def from_dict_contra(data: Dict[str, Any]) -> ContraVoucher:
    """从字典创建ContraVoucher对象"""
    return ContraVoucher(
        **_base_fields(data, DocumentType.CONTRA),
        from_account_id=to_optional_int(data.get("from_account_id")),
        to_account_id=to_optional_int(data.get("to_account_id")),
        amount=data.get("amount"),
        narration=data.get("narration") or "",
    )


def from_dict(data: Dict[str, Any], target_type: Type[T]) -> T:
    """从字典创建指定类型的对象"""
    if target_type == Voucher:
        return from_dict_voucher(data)  # type: ignore
    elif target_type == TradeDocument:
        return from_dict_trade_document(data)  # type: ignore
    elif target_type == ContraVoucher:
        return from_dict_contra(data)  # type: ignore
    elif target_type == LineItem:
        return from_dict_line_item(data)  # type: ignore
    elif target_type == VoucherLine:
        return from_dict_voucher_line(data)  # type: ignore
    else:
        raise ValueError(f"Unsupported target type: {target_type}")


def from_json(json_str: str, target_type: Type[T]) -> T:
    """从JSON字符串反序列化对象"""
    return from_dict(json.loads(json_str), target_type)


# ==================== 出站报文 ====================

def _amount(value: Any) -> float:
    """金额字段：保留两位小数后作为 JSON 数字发送"""
    return float(money(value))


def _rate(value: Any) -> float:
    return float(to_decimal(value))


def _date_value(value: Optional[date], as_datetime: bool) -> Optional[str]:
    if value is None:
        return None
    if as_datetime:
        return datetime.combine(value, time()).isoformat()
    return value.isoformat()


def line_item_payload(line: LineItem) -> Dict[str, Any]:
    """单个商品明细行的出站字段"""
    return {
        "line_no": line.line_no,
        "product_id": line.reference_id,
        "product_name": line.product_name,
        "hsn_code": line.hsn_code,
        "batch_number": line.batch_number,
        "mrp": _amount(line.mrp),
        "quantity": _rate(line.quantity),
        "free_quantity": _rate(line.free_quantity),
        "unit_price": _amount(line.unit_price),
        "line_discount_percent": _rate(line.discount_percent),
        "line_discount_amount": _amount(line.discount_amount),
        "taxable_amount": _amount(line.taxable_amount),
        "cgst_rate": _rate(line.cgst_rate_percent),
        "cgst_amount": _amount(line.cgst_amount),
        "sgst_rate": _rate(line.sgst_rate_percent),
        "sgst_amount": _amount(line.sgst_amount),
        "igst_rate": _rate(line.igst_rate_percent),
        "igst_amount": _amount(line.igst_amount),
        "cess_rate": _rate(line.cess_rate_percent),
        "cess_amount": _amount(line.cess_amount),
        "total_tax_amount": _amount(line.total_tax_amount),
        "total_amount": _amount(line.line_total),
        "expiry_date": _date_value(line.expiry_date, as_datetime=False),
        "description": line.description,
    }


def _purchase_item_payload(line: LineItem) -> Dict[str, Any]:
    """采购订单明细行（后端按 product_id/unit_price/total_amount 入库）"""
    return {
        "line_no": line.line_no,
        "product_id": line.reference_id,
        "product_name": line.product_name,
        "batch_number": line.batch_number,
        "mrp": _amount(line.mrp),
        "quantity": _rate(line.quantity),
        "free_quantity": _rate(line.free_quantity),
        "unit_price": _amount(line.unit_price),
        "gst_rate": _rate(line.tax_rate_percent),
        "cgst_rate": _rate(line.cgst_rate_percent),
        "sgst_rate": _rate(line.sgst_rate_percent),
        "igst_rate": _rate(line.igst_rate_percent),
        "discount_percent": _rate(line.discount_percent),
        "discount_amount": _amount(line.discount_amount),
        "total_amount": _amount(line.line_total),
    }


def _note_item_payload(line: LineItem) -> Dict[str, Any]:
    """贷项/借项通知单明细行，金额字段带 _base 后缀（本位币）"""
    return {
        "line_no": line.line_no,
        "product_id": line.reference_id,
        "product_name": line.product_name,
        "hsn_code": line.hsn_code,
        "batch_number": line.batch_number,
        "mrp": _amount(line.mrp),
        "quantity": _rate(line.quantity),
        "free_quantity": _rate(line.free_quantity),
        "unit_price_base": _amount(line.unit_price),
        "discount_percent": _rate(line.discount_percent),
        "taxable_amount_base": _amount(line.taxable_amount),
        "cgst_rate": _rate(line.cgst_rate_percent),
        "cgst_amount_base": _amount(line.cgst_amount),
        "sgst_rate": _rate(line.sgst_rate_percent),
        "sgst_amount_base": _amount(line.sgst_amount),
        "igst_rate": _rate(line.igst_rate_percent),
        "igst_amount_base": _amount(line.igst_amount),
        "tax_amount_base": _amount(line.total_tax_amount),
        "total_amount_base": _amount(line.line_total),
    }


def _sales_order_payload(
    document: TradeDocument,
    result: "ValidationResult",
    profile: "DocumentProfile",
) -> Dict[str, Any]:
    totals = result.totals
    return {
        profile.number_field: document.document_number,
        profile.date_field: _date_value(document.document_date, profile.date_as_datetime),
        profile.party_field: document.party_id,
        "reference_number": document.reference_number,
        "notes": document.notes,
        "subtotal_amount": _amount(totals.subtotal),
        "header_discount_percent": _rate(document.header_discount_percent),
        "header_discount_amount": _amount(totals.discount_amount),
        "taxable_amount": _amount(totals.taxable_amount),
        "cgst_amount": _amount(totals.cgst_amount),
        "sgst_amount": _amount(totals.sgst_amount),
        "igst_amount": _amount(totals.igst_amount),
        "cess_amount": _amount(totals.cess_amount),
        "total_tax_amount": _amount(totals.total_tax_amount),
        "roundoff": _amount(document.roundoff),
        "net_amount": _amount(totals.final_total),
        "status": "DRAFT",
        profile.lines_field: [line_item_payload(line) for line in result.lines],
    }


def _purchase_order_payload(
    document: TradeDocument,
    result: "ValidationResult",
    profile: "DocumentProfile",
) -> Dict[str, Any]:
    totals = result.totals
    return {
        "order": {
            profile.number_field: document.document_number,
            profile.party_field: document.party_id,
            profile.date_field: _date_value(document.document_date, profile.date_as_datetime),
            "reference_number": document.reference_number,
            "notes": document.notes,
            "total_amount": _amount(totals.final_total),
            "discount_percent": _rate(document.header_discount_percent),
            "discount_amount": _amount(totals.discount_amount),
            "roundoff": _amount(document.roundoff),
        },
        profile.lines_field: [_purchase_item_payload(line) for line in result.lines],
    }


def _note_payload(
    document: TradeDocument,
    result: "ValidationResult",
    profile: "DocumentProfile",
) -> Dict[str, Any]:
    # 通知单直接过账；subtotal_base 为应税金额合计，total_amount_base 与界面显示的合计一致
    totals = result.totals
    return {
        profile.number_field: document.document_number,
        profile.date_field: _date_value(document.document_date, profile.date_as_datetime),
        profile.party_field: document.party_id,
        "original_invoice_number": document.original_invoice_number or None,
        "reason": document.reason,
        "status": "POSTED",
        "subtotal_base": _amount(totals.taxable_amount),
        "cgst_amount_base": _amount(totals.cgst_amount),
        "sgst_amount_base": _amount(totals.sgst_amount),
        "igst_amount_base": _amount(totals.igst_amount),
        "tax_amount_base": _amount(totals.total_tax_amount),
        "total_amount_base": _amount(totals.final_total),
        profile.lines_field: [_note_item_payload(line) for line in result.lines],
    }


_TRADE_PAYLOAD_BUILDERS = {
    "order": _sales_order_payload,
    "order_envelope": _purchase_order_payload,
    "note": _note_payload,
}


def _trade_payload(
    document: TradeDocument,
    result: "ValidationResult",
    profile: "DocumentProfile",
) -> Dict[str, Any]:
    return _TRADE_PAYLOAD_BUILDERS[profile.payload_shape](document, result, profile)


def _voucher_payload(
    voucher: Voucher,
    result: "ValidationResult",
    profile: "DocumentProfile",
    is_posted: bool,
) -> Dict[str, Any]:
    lines: List[Dict[str, Any]] = [
        {
            "account_id": line.account_id,
            "debit": _amount(line.debit),
            "credit": _amount(line.credit),
            "description": line.description,
            "gst_rate": _rate(line.gst_rate_percent),
            "gst_amount": _amount(line.gst_amount),
            "cost_center_id": line.cost_center_id,
        }
        for line in result.lines
    ]
    return {
        "voucher_type": voucher.voucher_type,
        profile.number_field: voucher.document_number,
        profile.date_field: _date_value(voucher.document_date, profile.date_as_datetime),
        "description": voucher.description,
        "reference_number": voucher.reference_number,
        profile.party_field: voucher.party_account_id,
        "payment_method": voucher.payment_method,
        "cheque_number": voucher.cheque_number,
        "cheque_date": voucher.cheque_date,
        "bank_name": voucher.bank_name,
        "currency": voucher.currency,
        "exchange_rate": _rate(voucher.exchange_rate),
        "total_amount": _amount(result.total_amount),
        "is_posted": is_posted,
        profile.lines_field: lines,
    }


def _contra_payload(
    contra: ContraVoucher,
    profile: "DocumentProfile",
) -> Dict[str, Any]:
    return {
        profile.number_field: contra.document_number,
        profile.date_field: _date_value(contra.document_date, profile.date_as_datetime),
        "from_account_id": contra.from_account_id,
        "to_account_id": contra.to_account_id,
        "amount": _amount(contra.amount),
        "narration": contra.narration,
    }


def build_payload(
    document: Any,
    result: "ValidationResult",
    *,
    is_posted: bool = False,
    client_reference: Optional[str] = None,
) -> Dict[str, Any]:
    """Assemble the request body for a validated document.

    Only the valid lines carried by ``result`` are sent. Money fields are
    rounded to two places here and nowhere earlier.
    """
    from ..engine.profiles import get_profile

    if not result.ok:
        raise ValueError("Cannot build a payload for a document that failed validation")

    profile = get_profile(document.document_type)
    if isinstance(document, Voucher):
        payload = _voucher_payload(document, result, profile, is_posted)
    elif isinstance(document, TradeDocument):
        payload = _trade_payload(document, result, profile)
    elif isinstance(document, ContraVoucher):
        payload = _contra_payload(document, profile)
    else:
        raise TypeError(f"Unsupported document: {type(document).__name__}")

    if client_reference:
        payload["client_reference"] = client_reference
    return payload


__all__ = [
    "DocumentJSONEncoder",
    "build_payload",
    "from_dict",
    "from_json",
    "line_item_payload",
    "to_dict",
    "to_json",
]
