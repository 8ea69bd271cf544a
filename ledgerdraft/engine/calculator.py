"""Per-line amount derivation.

The step order below is the one the backend uses; no rounding is applied
between steps so that totals stay reproducible against posted documents.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Iterable, List

from ..models.base import HUNDRED
from ..models.document import LineItem


def recompute(line: LineItem) -> LineItem:
    """Return a copy of ``line`` with every derived amount recalculated.

    Negative inputs are not rejected here; they yield negative amounts which
    validation refuses on submission.
    """
    base_amount = line.unit_price * line.quantity
    discount_amount = base_amount * line.discount_percent / HUNDRED
    taxable_amount = base_amount - discount_amount
    cgst_amount = taxable_amount * line.cgst_rate_percent / HUNDRED
    sgst_amount = taxable_amount * line.sgst_rate_percent / HUNDRED
    igst_amount = taxable_amount * line.igst_rate_percent / HUNDRED
    cess_amount = taxable_amount * line.cess_rate_percent / HUNDRED
    total_tax_amount = cgst_amount + sgst_amount + igst_amount + cess_amount

    return replace(
        line,
        discount_amount=discount_amount,
        taxable_amount=taxable_amount,
        cgst_amount=cgst_amount,
        sgst_amount=sgst_amount,
        igst_amount=igst_amount,
        cess_amount=cess_amount,
        total_tax_amount=total_tax_amount,
        line_total=taxable_amount + total_tax_amount,
    )


def recompute_all(lines: Iterable[LineItem]) -> List[LineItem]:
    return [recompute(line) for line in lines]


__all__ = ["recompute", "recompute_all"]
