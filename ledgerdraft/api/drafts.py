"""草稿计算接口 - 明细重算、汇总、校验和编号预览"""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, HTTPException, status
from pydantic import BaseModel, Field

from ..config import get_settings
from ..engine import (
    ValidationResult,
    aggregate,
    generate_for,
    recompute,
    recompute_all,
    validate_contra,
    validate_trade_document,
    validate_voucher,
)
from ..models import ContraVoucher, DocumentType, LineItem, TradeDocument, Voucher, split_gst_rate
from ..models.serialization import build_payload, from_dict, to_dict

router = APIRouter()


# ==================== 请求模型 ====================

class LineItemIn(BaseModel):
    reference_id: int = 0
    line_no: int = 1
    quantity: Decimal = Decimal("0")
    free_quantity: Decimal = Decimal("0")
    unit_price: Decimal = Decimal("0")
    discount_percent: Decimal = Decimal("0")
    cgst_rate_percent: Decimal = Decimal("0")
    sgst_rate_percent: Decimal = Decimal("0")
    igst_rate_percent: Decimal = Decimal("0")
    cess_rate_percent: Decimal = Decimal("0")
    # 合计 GST 税率：提供时覆盖 CGST/SGST/IGST
    gst_rate_percent: Optional[Decimal] = None
    inter_state: bool = False
    product_name: str = ""
    hsn_code: str = ""
    batch_number: str = ""
    mrp: Decimal = Decimal("0")
    expiry_date: Optional[date] = None
    description: str = ""

    def to_line(self) -> LineItem:
        data = self.model_dump(exclude={"gst_rate_percent", "inter_state"})
        if self.gst_rate_percent is not None:
            data.update(split_gst_rate(self.gst_rate_percent, inter_state=self.inter_state))
        return LineItem(**data)


class TotalsRequest(BaseModel):
    lines: List[LineItemIn] = Field(default_factory=list)
    header_discount_percent: Decimal = Decimal("0")
    roundoff: Decimal = Decimal("0")


class VoucherLineIn(BaseModel):
    account_id: Optional[int] = None
    debit: Decimal = Decimal("0")
    credit: Decimal = Decimal("0")
    description: str = ""
    gst_rate_percent: Decimal = Decimal("0")
    gst_amount: Decimal = Decimal("0")
    cost_center_id: Optional[int] = None


class VoucherIn(BaseModel):
    document_type: DocumentType = DocumentType.JOURNAL
    document_number: str = ""
    document_date: Optional[date] = None
    description: str = ""
    reference_number: str = ""
    party_account_id: Optional[int] = None
    payment_method: str = ""
    cheque_number: str = ""
    cheque_date: str = ""
    bank_name: str = ""
    lines: List[VoucherLineIn] = Field(default_factory=list)


class TradeDocumentIn(BaseModel):
    document_type: DocumentType = DocumentType.PURCHASE_ORDER
    document_number: str = ""
    document_date: Optional[date] = None
    party_id: Optional[int] = None
    header_discount_percent: Decimal = Decimal("0")
    roundoff: Decimal = Decimal("0")
    reference_number: str = ""
    notes: str = ""
    reason: str = ""
    original_invoice_number: str = ""
    lines: List[LineItemIn] = Field(default_factory=list)


class ContraIn(BaseModel):
    document_number: str = ""
    document_date: Optional[date] = None
    from_account_id: Optional[int] = None
    to_account_id: Optional[int] = None
    amount: Decimal = Decimal("0")
    narration: str = ""


class DocumentNumberRequest(BaseModel):
    document_type: DocumentType
    tenant_id: Optional[int] = None
    at: Optional[datetime] = None


class DocumentNumberResponse(BaseModel):
    document_type: DocumentType
    document_number: str


# ==================== 工具函数 ====================

def _voucher_from(payload: VoucherIn) -> Voucher:
    if not payload.document_type.is_ledger:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"{payload.document_type.value} is not a ledger voucher type",
        )
    return from_dict(payload.model_dump(), Voucher)


def _trade_document_from(payload: TradeDocumentIn) -> TradeDocument:
    if not payload.document_type.is_trade:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"{payload.document_type.value} is not an order or note type",
        )
    document = from_dict(payload.model_dump(exclude={"lines"}), TradeDocument)
    document.lines = [line.to_line() for line in payload.lines]
    return document


def _issue_dict(result: ValidationResult) -> Optional[Dict[str, Any]]:
    if result.issue is None:
        return None
    return {
        "code": result.issue.code.value,
        "category": result.issue.code.category,
        "message": result.issue.message,
        "field": result.issue.field,
    }


def _validation_response(result: ValidationResult) -> Dict[str, Any]:
    """校验失败也返回 200：校验结果是数据，不是 HTTP 错误"""
    return {
        "ok": result.ok,
        "issue": _issue_dict(result),
        "total_amount": float(result.total_amount),
        "warnings": result.warnings,
        "totals": to_dict(result.totals) if result.totals else None,
    }


# ==================== 接口 ====================

@router.post("/lines/recompute")
def recompute_line(payload: LineItemIn) -> Dict[str, Any]:
    """重算单行的折扣、应税金额、各项税额和行合计"""
    return to_dict(recompute(payload.to_line()))


@router.post("/totals")
def document_totals(payload: TotalsRequest) -> Dict[str, Any]:
    """汇总明细行并应用整单折扣和抹零"""
    lines = recompute_all(line.to_line() for line in payload.lines)
    return to_dict(aggregate(lines, payload.header_discount_percent, payload.roundoff))


@router.post("/vouchers/validate")
def validate_voucher_draft(payload: VoucherIn) -> Dict[str, Any]:
    result = validate_voucher(_voucher_from(payload), get_settings().balance_tolerance)
    return _validation_response(result)


@router.post("/contra/validate")
def validate_contra_draft(payload: ContraIn) -> Dict[str, Any]:
    contra = from_dict(payload.model_dump(), ContraVoucher)
    return _validation_response(validate_contra(contra))


@router.post("/trade-documents/validate")
def validate_trade_draft(payload: TradeDocumentIn) -> Dict[str, Any]:
    return _validation_response(validate_trade_document(_trade_document_from(payload)))


@router.post("/trade-documents/payload")
def preview_trade_payload(payload: TradeDocumentIn) -> Dict[str, Any]:
    """预览提交给后端的报文；单据未通过校验时返回 422"""
    document = _trade_document_from(payload)
    result = validate_trade_document(document)
    if not result.ok:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=_issue_dict(result),
        )
    return build_payload(document, result)


@router.post("/document-numbers", response_model=DocumentNumberResponse)
def new_document_number(payload: DocumentNumberRequest) -> DocumentNumberResponse:
    """生成草稿编号（仅作显示用，最终编号以后端为准）"""
    tenant_id = payload.tenant_id
    if tenant_id is None:
        tenant_id = get_settings().tenant_id
    return DocumentNumberResponse(
        document_type=payload.document_type,
        document_number=generate_for(payload.document_type, tenant_id, payload.at),
    )


__all__ = ["router"]
