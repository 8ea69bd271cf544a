"""Header-level totals for trade documents and ledger vouchers."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Iterable, Tuple

from ..models.base import HUNDRED, ZERO, to_decimal
from ..models.document import LineItem, VoucherLine


@dataclass(frozen=True)
class DocumentTotals:
    subtotal: Decimal = ZERO
    discount_amount: Decimal = ZERO
    final_total: Decimal = ZERO

    # tax summary over the same lines
    taxable_amount: Decimal = ZERO
    cgst_amount: Decimal = ZERO
    sgst_amount: Decimal = ZERO
    igst_amount: Decimal = ZERO
    cess_amount: Decimal = ZERO
    total_tax_amount: Decimal = ZERO


def aggregate(
    lines: Iterable[LineItem],
    header_discount_percent: Any = 0,
    roundoff: Any = 0,
) -> DocumentTotals:
    """Sum line totals and apply the header discount and round-off.

    ``lines`` are expected to be recomputed already; nothing is cached
    between calls.
    """
    lines = list(lines)
    subtotal = sum((line.line_total for line in lines), ZERO)
    discount_amount = subtotal * to_decimal(header_discount_percent) / HUNDRED
    final_total = subtotal - discount_amount + to_decimal(roundoff)

    cgst = sum((line.cgst_amount for line in lines), ZERO)
    sgst = sum((line.sgst_amount for line in lines), ZERO)
    igst = sum((line.igst_amount for line in lines), ZERO)
    cess = sum((line.cess_amount for line in lines), ZERO)
    return DocumentTotals(
        subtotal=subtotal,
        discount_amount=discount_amount,
        final_total=final_total,
        taxable_amount=sum((line.taxable_amount for line in lines), ZERO),
        cgst_amount=cgst,
        sgst_amount=sgst,
        igst_amount=igst,
        cess_amount=cess,
        total_tax_amount=cgst + sgst + igst + cess,
    )


def voucher_totals(lines: Iterable[VoucherLine]) -> Tuple[Decimal, Decimal, Decimal]:
    """Running ``(total_debit, total_credit, difference)`` over all lines, valid or not."""
    total_debit = ZERO
    total_credit = ZERO
    for line in lines:
        total_debit += line.debit
        total_credit += line.credit
    return total_debit, total_credit, total_debit - total_credit


__all__ = ["DocumentTotals", "aggregate", "voucher_totals"]
