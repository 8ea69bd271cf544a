"""In-memory draft of one document, owned by the client until submission."""

from __future__ import annotations

import copy
import logging
from dataclasses import dataclass, field, replace
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Optional, Tuple, Union
from uuid import uuid4

from ..config import DEFAULT_BALANCE_TOLERANCE
from ..models.base import DocumentStatus, DocumentType
from ..models.document import ContraVoucher, LineItem, TradeDocument, Voucher, VoucherLine
from .calculator import recompute
from .numbering import generate_for
from .profiles import DocumentProfile, get_profile
from .totals import DocumentTotals, aggregate, voucher_totals
from .validation import ValidationResult, valid_trade_lines, validate

logger = logging.getLogger(__name__)

Document = Union[Voucher, TradeDocument, ContraVoucher]

# 表头中不能通过 set_header 修改的字段
_PROTECTED_FIELDS = frozenset(
    {"document_type", "document_number", "lines", "status", "server_number"}
)


class DraftLockedError(RuntimeError):
    """A submitted draft was modified; call ``revise()`` for an editable copy."""


def _new_key() -> str:
    return uuid4().hex


def _empty_document(document_type: DocumentType, number: str, today: date) -> Document:
    profile = get_profile(document_type)
    if document_type == DocumentType.CONTRA:
        return ContraVoucher(document_number=number, document_date=today)
    if profile.ledger:
        return Voucher(
            document_type=document_type,
            document_number=number,
            document_date=today,
            lines=[VoucherLine() for _ in range(profile.min_lines)],
        )
    return TradeDocument(
        document_type=document_type,
        document_number=number,
        document_date=today,
        lines=[LineItem(line_no=index + 1) for index in range(profile.min_lines)],
    )


@dataclass
class Draft:
    """
    Editable document plus the bookkeeping needed to submit it once.

    ``idempotency_key`` is generated per draft and sent with the submission
    so the backend can drop a duplicate; ``revision`` changes on every reset
    so a response arriving for an older revision can be recognised.
    """

    document: Document
    tenant_id: int = 1
    idempotency_key: str = field(default_factory=_new_key)
    revision: int = 0
    in_flight: bool = False

    @classmethod
    def new(
        cls,
        document_type: DocumentType,
        tenant_id: int = 1,
        now: Optional[datetime] = None,
    ) -> "Draft":
        now = now or datetime.now()
        document_type = DocumentType(document_type)
        number = generate_for(document_type, tenant_id, now)
        return cls(
            document=_empty_document(document_type, number, now.date()),
            tenant_id=tenant_id,
        )

    @property
    def profile(self) -> DocumentProfile:
        return get_profile(self.document.document_type)

    @property
    def is_submitted(self) -> bool:
        return self.document.status == DocumentStatus.SUBMITTED

    def _ensure_editable(self) -> None:
        if self.is_submitted:
            raise DraftLockedError(
                f"{self.document.document_number} has been submitted and is read-only"
            )

    def _lines(self) -> list:
        if isinstance(self.document, ContraVoucher):
            raise TypeError("Contra transfers have no lines")
        return self.document.lines

    def _renumber(self) -> None:
        if isinstance(self.document, TradeDocument):
            self.document.lines = [
                replace(line, line_no=index + 1)
                for index, line in enumerate(self.document.lines)
            ]

    # ---- line editing ----

    def add_line(self) -> Union[LineItem, VoucherLine]:
        self._ensure_editable()
        lines = self._lines()
        line = VoucherLine() if isinstance(self.document, Voucher) else LineItem()
        lines.append(line)
        self._renumber()
        return lines[-1]

    def remove_line(self, index: int) -> bool:
        """Drop a line; refused (``False``) when it would go below the minimum."""
        self._ensure_editable()
        lines = self._lines()
        if len(lines) <= max(self.profile.min_lines, 1):
            return False
        del lines[index]
        self._renumber()
        return True

    def update_line(self, index: int, **changes: Any) -> Union[LineItem, VoucherLine]:
        """Apply field edits to one line; trade lines are recomputed immediately."""
        self._ensure_editable()
        lines = self._lines()
        updated = replace(lines[index], **changes)
        if isinstance(updated, LineItem):
            updated = recompute(updated)
        lines[index] = updated
        return updated

    def set_header(self, **changes: Any) -> Document:
        self._ensure_editable()
        protected = _PROTECTED_FIELDS.intersection(changes)
        if protected:
            raise ValueError(f"Cannot set {', '.join(sorted(protected))} directly")
        self.document = replace(self.document, **changes)
        return self.document

    # ---- derived values ----

    def totals(self) -> DocumentTotals:
        """Header totals over the lines that would be submitted."""
        if not isinstance(self.document, TradeDocument):
            raise TypeError("Header totals apply to orders and notes only")
        return aggregate(
            valid_trade_lines(self.document),
            self.document.header_discount_percent,
            self.document.roundoff,
        )

    def voucher_totals(self) -> Tuple[Decimal, Decimal, Decimal]:
        if not isinstance(self.document, Voucher):
            raise TypeError("Debit/credit totals apply to ledger vouchers only")
        return voucher_totals(self.document.lines)

    def validate(self, tolerance: Any = DEFAULT_BALANCE_TOLERANCE) -> ValidationResult:
        return validate(self.document, tolerance)

    # ---- lifecycle ----

    def reset(self, now: Optional[datetime] = None) -> None:
        """Rebuild an empty document of the same type with a fresh number and key."""
        now = now or datetime.now()
        document_type = self.document.document_type
        number = generate_for(document_type, self.tenant_id, now)
        self.document = _empty_document(document_type, number, now.date())
        self.idempotency_key = _new_key()
        self.revision += 1
        self.in_flight = False
        logger.debug("Draft reset to %s (revision %d)", number, self.revision)

    def revise(self, now: Optional[datetime] = None) -> "Draft":
        """Return an editable copy of this draft under a new number and key."""
        number = generate_for(self.document.document_type, self.tenant_id, now or datetime.now())
        document = replace(
            copy.deepcopy(self.document),
            document_number=number,
            server_number=None,
            status=DocumentStatus.DRAFT,
        )
        return Draft(document=document, tenant_id=self.tenant_id)

    def mark_submitted(self, server_number: Optional[str] = None) -> None:
        self.document.server_number = server_number
        self.document.status = DocumentStatus.SUBMITTED
        self.in_flight = False


__all__ = ["Draft", "DraftLockedError"]
