"""
多行财务单据草稿引擎
记账凭证、采购/销售订单、贷项/借项通知单和 Contra 划转的计算、校验与提交

Quickstart::

    import asyncio
    from ledgerdraft import Draft, DocumentType, submit_draft

    draft = Draft.new(DocumentType.JOURNAL, tenant_id=7)
    draft.update_line(0, account_id=1, debit=500)
    draft.update_line(1, account_id=2, credit=500)
    print(draft.validate().ok)

    result = asyncio.run(submit_draft(draft))
    print(result.success, result.message)
"""

from .client import BackendAPIError, SubmissionResult, submit_draft
from .config import Settings, get_settings, load_env
from .engine import (
    DocumentTotals,
    Draft,
    DraftLockedError,
    IssueCode,
    ValidationResult,
    aggregate,
    generate,
    generate_for,
    recompute,
    validate,
)
from .models import (
    ContraVoucher,
    DocumentType,
    LineItem,
    TradeDocument,
    Voucher,
    VoucherLine,
)

load_env()

__version__ = "0.1.0"

__all__ = [
    "BackendAPIError",
    "ContraVoucher",
    "DocumentTotals",
    "DocumentType",
    "Draft",
    "DraftLockedError",
    "IssueCode",
    "LineItem",
    "Settings",
    "SubmissionResult",
    "TradeDocument",
    "ValidationResult",
    "Voucher",
    "VoucherLine",
    "aggregate",
    "generate",
    "generate_for",
    "get_settings",
    "load_env",
    "recompute",
    "submit_draft",
    "validate",
    "__version__",
]
