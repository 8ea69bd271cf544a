"""Pre-submission validation for vouchers, trade documents and contra transfers.

Every check runs client-side before any network call and reports its outcome
as a :class:`ValidationResult`; nothing in this module raises for invalid
user input. Checks are sequential and stop at the first failure so the user
is shown one message at a time.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Any, List, Optional, Union

from ..config import DEFAULT_BALANCE_TOLERANCE
from ..models.base import HUNDRED, ZERO, BaseDocument, to_decimal
from ..models.document import ContraVoucher, LineItem, TradeDocument, Voucher
from .calculator import recompute
from .profiles import get_profile
from .totals import DocumentTotals, aggregate

logger = logging.getLogger(__name__)


class IssueCode(str, Enum):
    MISSING_DOCUMENT_NUMBER = "MissingDocumentNumber"
    MISSING_DATE = "MissingDate"
    MISSING_PARTY = "MissingParty"
    INSUFFICIENT_LINES = "InsufficientLines"
    UNBALANCED_ENTRY = "UnbalancedEntry"
    INVALID_AMOUNT = "InvalidAmount"
    SAME_ACCOUNT = "SameAccount"
    BACKEND_REJECTED = "BackendRejected"

    @property
    def category(self) -> str:
        """Error family shown to callers; the three MISSING_* codes share one."""
        if self in (
            IssueCode.MISSING_DOCUMENT_NUMBER,
            IssueCode.MISSING_DATE,
            IssueCode.MISSING_PARTY,
        ):
            return "MissingRequiredField"
        return self.value


@dataclass(frozen=True)
class ValidationIssue:
    code: IssueCode
    message: str
    field: Optional[str] = None


@dataclass
class ValidationResult:
    ok: bool
    issue: Optional[ValidationIssue] = None
    total_amount: Decimal = ZERO
    lines: List[Any] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    totals: Optional[DocumentTotals] = None

    @classmethod
    def success(
        cls,
        total_amount: Decimal,
        lines: List[Any],
        warnings: Optional[List[str]] = None,
        totals: Optional[DocumentTotals] = None,
    ) -> "ValidationResult":
        return cls(
            ok=True,
            total_amount=total_amount,
            lines=lines,
            warnings=warnings or [],
            totals=totals,
        )

    @classmethod
    def failure(
        cls,
        code: IssueCode,
        message: str,
        field_name: Optional[str] = None,
    ) -> "ValidationResult":
        logger.info("Validation failed: %s (%s)", code.value, message)
        return cls(ok=False, issue=ValidationIssue(code, message, field_name))

    @property
    def message(self) -> str:
        return self.issue.message if self.issue else ""


def _check_header(document: BaseDocument, number_field: str, date_field: str) -> Optional[ValidationResult]:
    if not (document.document_number or "").strip():
        return ValidationResult.failure(
            IssueCode.MISSING_DOCUMENT_NUMBER, "Document number is required", number_field
        )
    if document.document_date is None:
        return ValidationResult.failure(IssueCode.MISSING_DATE, "Date is required", date_field)
    return None


def validate_voucher(voucher: Voucher, tolerance: Any = DEFAULT_BALANCE_TOLERANCE) -> ValidationResult:
    """Gate a ledger voucher until it is balanced double-entry.

    A line with both debit and credit set is accepted as long as the
    document balances; it only produces a warning.
    """
    profile = get_profile(voucher.document_type)
    failed = _check_header(voucher, profile.number_field, profile.date_field)
    if failed:
        return failed

    if profile.require_party and not voucher.party_account_id:
        return ValidationResult.failure(
            IssueCode.MISSING_PARTY,
            f"Party account is required for {voucher.voucher_type} vouchers",
            profile.party_field,
        )

    valid_lines = [line for line in voucher.lines if line.is_valid]
    if len(valid_lines) < profile.min_lines:
        return ValidationResult.failure(
            IssueCode.INSUFFICIENT_LINES,
            f"At least {profile.min_lines} line items are required",
            "lines",
        )

    for index, line in enumerate(valid_lines):
        if line.debit < 0 or line.credit < 0:
            return ValidationResult.failure(
                IssueCode.INVALID_AMOUNT,
                "Debit and credit amounts cannot be negative",
                f"lines[{index}]",
            )

    total_debit = sum((line.debit for line in valid_lines), ZERO)
    total_credit = sum((line.credit for line in valid_lines), ZERO)
    if abs(total_debit - total_credit) > to_decimal(tolerance):
        return ValidationResult.failure(
            IssueCode.UNBALANCED_ENTRY,
            f"Total debit must equal total credit (debit={total_debit}, credit={total_credit})",
            "lines",
        )

    warnings = [
        f"Line {index + 1} has both a debit and a credit amount"
        for index, line in enumerate(valid_lines)
        if line.is_two_sided
    ]
    return ValidationResult.success(total_debit, valid_lines, warnings)


def _is_valid_trade_line(line: LineItem, require_unit_price: bool) -> bool:
    if line.reference_id <= 0 or line.quantity <= 0:
        return False
    return not require_unit_price or line.unit_price != 0


def valid_trade_lines(document: TradeDocument) -> List[LineItem]:
    """Recomputed lines that count towards totals and are sent to the backend."""
    profile = get_profile(document.document_type)
    return [
        recompute(line)
        for line in document.lines
        if _is_valid_trade_line(line, profile.require_unit_price)
    ]


def _invalid_line_field(line: LineItem) -> Optional[str]:
    """Name of the first out-of-range input on ``line``, if any."""
    if line.unit_price < 0:
        return "unit_price"
    if line.free_quantity < 0:
        return "free_quantity"
    if not ZERO <= line.discount_percent <= HUNDRED:
        return "discount_percent"
    for name in ("cgst_rate_percent", "sgst_rate_percent", "igst_rate_percent", "cess_rate_percent"):
        if getattr(line, name) < 0:
            return name
    return None


def validate_trade_document(document: TradeDocument) -> ValidationResult:
    """Required-field and amount checks for orders and credit/debit notes.

    Only valid lines (product selected, positive quantity) are totalled and
    returned for submission.
    """
    profile = get_profile(document.document_type)
    failed = _check_header(document, profile.number_field, profile.date_field)
    if failed:
        return failed

    if profile.require_party and not document.party_id:
        party = "supplier" if profile.party_field == "supplier_id" else "customer"
        return ValidationResult.failure(
            IssueCode.MISSING_PARTY, f"Please select a {party}", profile.party_field
        )

    valid_lines = valid_trade_lines(document)
    if len(valid_lines) < profile.min_lines:
        return ValidationResult.failure(
            IssueCode.INSUFFICIENT_LINES, "Please add at least one valid item", "items"
        )

    for index, line in enumerate(valid_lines):
        bad_field = _invalid_line_field(line)
        if bad_field:
            return ValidationResult.failure(
                IssueCode.INVALID_AMOUNT,
                f"Line {line.line_no}: {bad_field.replace('_', ' ')} is out of range",
                f"items[{index}].{bad_field}",
            )

    if not ZERO <= document.header_discount_percent <= HUNDRED:
        return ValidationResult.failure(
            IssueCode.INVALID_AMOUNT,
            "Header discount must be between 0 and 100 percent",
            "header_discount_percent",
        )

    totals = aggregate(valid_lines, document.header_discount_percent, document.roundoff)
    return ValidationResult.success(totals.final_total, valid_lines, totals=totals)


def validate_contra(contra: ContraVoucher) -> ValidationResult:
    """Checks for a single cash/bank transfer."""
    profile = get_profile(contra.document_type)
    failed = _check_header(contra, profile.number_field, profile.date_field)
    if failed:
        return failed
    if not contra.from_account_id:
        return ValidationResult.failure(
            IssueCode.MISSING_PARTY, "Please select From Account", "from_account_id"
        )
    if not contra.to_account_id:
        return ValidationResult.failure(
            IssueCode.MISSING_PARTY, "Please select To Account", "to_account_id"
        )
    if contra.from_account_id == contra.to_account_id:
        return ValidationResult.failure(
            IssueCode.SAME_ACCOUNT, "From and To accounts must be different", "to_account_id"
        )
    if contra.amount <= 0:
        return ValidationResult.failure(
            IssueCode.INVALID_AMOUNT, "Amount must be greater than zero", "amount"
        )
    return ValidationResult.success(contra.amount, [])


def validate(
    document: Union[Voucher, TradeDocument, ContraVoucher],
    tolerance: Any = DEFAULT_BALANCE_TOLERANCE,
) -> ValidationResult:
    """Dispatch to the validator matching the document class."""
    if isinstance(document, Voucher):
        return validate_voucher(document, tolerance)
    if isinstance(document, TradeDocument):
        return validate_trade_document(document)
    if isinstance(document, ContraVoucher):
        return validate_contra(document)
    raise TypeError(f"Unsupported document: {type(document).__name__}")


__all__ = [
    "IssueCode",
    "ValidationIssue",
    "ValidationResult",
    "validate",
    "validate_contra",
    "validate_trade_document",
    "validate_voucher",
    "valid_trade_lines",
]
