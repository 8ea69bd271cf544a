"""单据计算引擎 - 明细计算、汇总、校验、编号和草稿生命周期"""

from .calculator import recompute, recompute_all
from .draft import Draft, DraftLockedError
from .numbering import generate, generate_for
from .profiles import PROFILES, DocumentProfile, get_profile
from .totals import DocumentTotals, aggregate, voucher_totals
from .validation import (
    IssueCode,
    ValidationIssue,
    ValidationResult,
    validate,
    validate_contra,
    validate_trade_document,
    validate_voucher,
    valid_trade_lines,
)

__all__ = [
    "DocumentProfile",
    "DocumentTotals",
    "Draft",
    "DraftLockedError",
    "IssueCode",
    "PROFILES",
    "ValidationIssue",
    "ValidationResult",
    "aggregate",
    "generate",
    "generate_for",
    "get_profile",
    "recompute",
    "recompute_all",
    "validate",
    "validate_contra",
    "validate_trade_document",
    "validate_voucher",
    "valid_trade_lines",
    "voucher_totals",
]
