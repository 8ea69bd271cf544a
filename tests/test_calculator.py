# tests/test_calculator.py
"""Tests for per-line amount derivation."""

from decimal import Decimal

from ledgerdraft.engine import recompute, recompute_all
from ledgerdraft.models import LineItem, split_gst_rate


class TestRecompute:

    def test_intra_state_line(self):
        line = recompute(LineItem(
            reference_id=1,
            quantity=10,
            unit_price=100,
            discount_percent=10,
            cgst_rate_percent=9,
            sgst_rate_percent=9,
        ))

        assert line.discount_amount == Decimal("100")
        assert line.taxable_amount == Decimal("900")
        assert line.cgst_amount == Decimal("81")
        assert line.sgst_amount == Decimal("81")
        assert line.igst_amount == 0
        assert line.total_tax_amount == Decimal("162")
        assert line.line_total == Decimal("1062")

    def test_line_total_is_taxable_plus_tax(self):
        line = recompute(LineItem(
            reference_id=1,
            quantity="3",
            unit_price="33.33",
            discount_percent="7.5",
            igst_rate_percent=18,
            cess_rate_percent=1,
        ))

        assert line.line_total == line.taxable_amount + line.total_tax_amount
        assert line.total_tax_amount == (
            line.cgst_amount + line.sgst_amount + line.igst_amount + line.cess_amount
        )

    def test_no_intermediate_rounding(self):
        line = recompute(LineItem(reference_id=1, quantity=1, unit_price="0.15", cgst_rate_percent="2.5"))

        # 0.15 * 2.5% = 0.00375, kept as is
        assert line.cgst_amount == Decimal("0.00375")

    def test_free_quantity_is_not_priced(self):
        line = recompute(LineItem(reference_id=1, quantity=2, free_quantity=5, unit_price=10))

        assert line.line_total == Decimal("20")

    def test_negative_inputs_are_tolerated(self):
        line = recompute(LineItem(reference_id=1, quantity=1, unit_price=-10))

        assert line.taxable_amount == Decimal("-10")
        assert line.line_total == Decimal("-10")

    def test_input_line_is_not_mutated(self):
        original = LineItem(reference_id=1, quantity=2, unit_price=10)
        recompute(original)

        assert original.line_total == 0

    def test_recompute_all_keeps_order(self):
        lines = recompute_all([
            LineItem(reference_id=1, line_no=1, quantity=1, unit_price=5),
            LineItem(reference_id=2, line_no=2, quantity=1, unit_price=7),
        ])

        assert [line.line_total for line in lines] == [Decimal("5"), Decimal("7")]


class TestGstSplit:

    def test_intra_state_halves_the_rate(self):
        rates = split_gst_rate(18)

        assert rates["cgst_rate_percent"] == Decimal("9")
        assert rates["sgst_rate_percent"] == Decimal("9")
        assert rates["igst_rate_percent"] == 0

    def test_inter_state_uses_igst(self):
        rates = split_gst_rate("12", inter_state=True)

        assert rates["igst_rate_percent"] == Decimal("12")
        assert rates["cgst_rate_percent"] == 0

    def test_for_product(self):
        line = LineItem.for_product(42, "250", 5, quantity=4, product_name="Paracetamol")

        assert line.reference_id == 42
        assert line.quantity == Decimal("4")
        assert line.cgst_rate_percent == Decimal("2.5")
        assert line.tax_rate_percent == Decimal("5")
        assert line.product_name == "Paracetamol"
