"""Unit tests for invoice calculations

Tests cover:
- Item totals and subtotal
- Percentage and fixed discounts
- GST on the taxable base, including negative bases
- Rounding to the cent
- Splitting tax into CGST and SGST lines
"""

from dataclasses import dataclass
from decimal import Decimal

import pytest

from src.domain.calculations import (
    ZERO,
    as_decimal,
    calculate_discount_amount,
    calculate_item_total,
    calculate_subtotal,
    calculate_tax_amount,
    compute_totals,
    round_money,
    split_tax,
)
from src.domain.invoice import DiscountType, TaxMode


@dataclass
class Item:
    quantity: int
    unit_price: object


@pytest.fixture
def items():
    return [Item(2, Decimal("100")), Item(1, Decimal("50"))]


class TestItemTotals:
    def test_item_total_is_quantity_times_price(self):
        assert calculate_item_total(Item(3, Decimal("12.50"))) == Decimal("37.50")

    def test_float_prices_do_not_pick_up_binary_noise(self):
        """
        Given: A float unit price of 0.1
        When: The item total is computed
        Then: The result is exactly 0.3
        """
        assert calculate_item_total(Item(3, 0.1)) == Decimal("0.3")

    def test_subtotal_sums_items(self, items):
        assert calculate_subtotal(items) == Decimal("250")

    def test_subtotal_of_no_items_is_zero(self):
        assert calculate_subtotal([]) == ZERO


class TestDiscount:
    def test_percentage_discount(self):
        assert calculate_discount_amount(Decimal("250"), DiscountType.PERCENTAGE, 10) == Decimal("25")

    def test_percentage_discount_on_empty_subtotal_is_zero(self):
        assert calculate_discount_amount(ZERO, DiscountType.PERCENTAGE, 10) == ZERO

    def test_percentage_discount_on_negative_subtotal_is_zero(self):
        assert calculate_discount_amount(Decimal("-5"), "percentage", 50) == ZERO

    def test_fixed_discount_may_exceed_subtotal(self):
        assert calculate_discount_amount(Decimal("250"), DiscountType.FIXED, 500) == Decimal("500")


class TestTax:
    def test_tax_on_discounted_base(self):
        assert calculate_tax_amount(Decimal("250"), Decimal("30"), TaxMode.IGST, 18) == Decimal("39.6")

    def test_no_gst_is_zero(self):
        assert calculate_tax_amount(Decimal("250"), ZERO, TaxMode.NO_GST, 18) == ZERO

    def test_negative_base_is_not_taxed(self):
        assert calculate_tax_amount(Decimal("250"), Decimal("500"), TaxMode.CGST_SGST, 18) == ZERO


class TestComputeTotals:
    def test_fixed_discount_with_igst(self, items):
        """
        Given: Items 2 x 100 and 1 x 50, fixed discount 30, IGST 18%
        When: Totals are computed
        Then: 250.00 - 30.00 + 39.60 = 259.60
        """
        # Act
        totals = compute_totals(items, DiscountType.FIXED, Decimal("30"), TaxMode.IGST, Decimal("18"))

        # Assert
        assert totals.subtotal == Decimal("250.00")
        assert totals.discount_amount == Decimal("30.00")
        assert totals.tax_amount == Decimal("39.60")
        assert totals.total == Decimal("259.60")

    def test_discount_larger_than_subtotal_gives_negative_total(self, items):
        totals = compute_totals(items, DiscountType.FIXED, Decimal("500"), TaxMode.IGST, Decimal("18"))

        assert totals.tax_amount == Decimal("0.00")
        assert totals.total == Decimal("-250.00")

    def test_percentage_discount_without_gst(self, items):
        totals = compute_totals(items, DiscountType.PERCENTAGE, Decimal("10"), TaxMode.NO_GST, Decimal("18"))

        assert totals.discount_amount == Decimal("25.00")
        assert totals.tax_amount == Decimal("0.00")
        assert totals.total == Decimal("225.00")

    def test_amounts_round_half_up_to_the_cent(self):
        """
        Given: A subtotal of 0.05 and 10% discount
        When: Totals are computed
        Then: The 0.005 discount rounds up to 0.01
        """
        totals = compute_totals([Item(1, "0.05")], DiscountType.PERCENTAGE, 10, TaxMode.NO_GST, 0)

        assert totals.discount_amount == Decimal("0.01")
        assert totals.total == Decimal("0.04")

    def test_total_identity_holds_after_rounding(self):
        totals = compute_totals(
            [Item(3, "33.333"), Item(7, "1.119")],
            DiscountType.PERCENTAGE,
            Decimal("12.5"),
            TaxMode.CGST_SGST,
            Decimal("18"),
        )

        assert totals.total == totals.subtotal - totals.discount_amount + totals.tax_amount

    def test_empty_invoice(self):
        totals = compute_totals([], DiscountType.PERCENTAGE, 0, TaxMode.IGST, 18)

        assert totals.subtotal == Decimal("0.00")
        assert totals.total == Decimal("0.00")


class TestSplitTax:
    def test_igst_is_a_single_line(self):
        lines = split_tax(Decimal("39.60"), TaxMode.IGST, Decimal("18"))

        assert len(lines) == 1
        assert lines[0].label == "IGST"
        assert lines[0].rate == Decimal("18")
        assert lines[0].amount == Decimal("39.60")

    def test_cgst_sgst_halves(self):
        lines = split_tax(Decimal("39.60"), TaxMode.CGST_SGST, Decimal("18"))

        assert [line.label for line in lines] == ["CGST", "SGST"]
        assert [line.rate for line in lines] == [Decimal("9"), Decimal("9")]
        assert [line.amount for line in lines] == [Decimal("19.80"), Decimal("19.80")]

    def test_odd_cent_goes_to_cgst_and_lines_add_up(self):
        """
        Given: A tax amount of 0.05 in CGST-SGST mode
        When: The tax is split
        Then: CGST is 0.03, SGST 0.02, and together they equal the tax
        """
        lines = split_tax(Decimal("0.05"), "CGST-SGST", 18)

        assert lines[0].amount == Decimal("0.03")
        assert lines[1].amount == Decimal("0.02")
        assert lines[0].amount + lines[1].amount == Decimal("0.05")

    def test_no_gst_has_no_lines(self):
        assert split_tax(Decimal("10"), TaxMode.NO_GST, 18) == []

    def test_zero_tax_has_no_lines(self):
        assert split_tax(ZERO, TaxMode.IGST, 18) == []


class TestHelpers:
    def test_as_decimal_keeps_decimals(self):
        value = Decimal("1.23")
        assert as_decimal(value) is value

    def test_round_money_negative(self):
        assert round_money(Decimal("-2.345")) == Decimal("-2.35")
