"""Invoice Calculations

Pure functions computing the monetary fields of an invoice from its line
items, discount configuration and tax configuration.

Rules:
- item total = quantity * unit_price
- subtotal = sum of item totals
- percentage discount = subtotal * value / 100 (0 when subtotal <= 0)
- fixed discount = value, even when it exceeds the subtotal
- tax = max(0, subtotal - discount) * rate / 100, 0 for "No GST"
- total = subtotal - discount + tax (may be negative)
"""

from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Iterable, List, Union

from src.domain.invoice import DiscountType, TaxMode

Number = Union[Decimal, int, float, str]

ZERO = Decimal("0")
HUNDRED = Decimal("100")
CENT = Decimal("0.01")


@dataclass(frozen=True)
class InvoiceTotals:
    """Computed monetary fields of an invoice, rounded to the cent"""

    subtotal: Decimal
    discount_amount: Decimal
    tax_amount: Decimal
    total: Decimal


@dataclass(frozen=True)
class TaxLine:
    """One GST line as displayed on the invoice summary"""

    label: str
    rate: Decimal
    amount: Decimal


def as_decimal(value: Number) -> Decimal:
    if isinstance(value, Decimal):
        return value
    # str() keeps floats like 0.1 from expanding to their binary value
    return Decimal(str(value))


def round_money(value: Number) -> Decimal:
    return as_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def calculate_item_total(item: Any) -> Decimal:
    """quantity * unit_price for any object exposing those attributes"""
    return as_decimal(item.quantity) * as_decimal(item.unit_price)


def calculate_subtotal(items: Iterable[Any]) -> Decimal:
    return sum((calculate_item_total(item) for item in items), ZERO)


def calculate_discount_amount(
    subtotal: Number,
    discount_type: Union[DiscountType, str],
    discount_value: Number,
) -> Decimal:
    subtotal = as_decimal(subtotal)
    value = as_decimal(discount_value)

    if DiscountType(discount_type) == DiscountType.PERCENTAGE:
        if subtotal <= ZERO:
            return ZERO
        return subtotal * value / HUNDRED

    return value


def calculate_tax_amount(
    subtotal: Number,
    discount_amount: Number,
    tax_mode: Union[TaxMode, str],
    tax_rate: Number,
) -> Decimal:
    if TaxMode(tax_mode) == TaxMode.NO_GST:
        return ZERO

    taxable_base = as_decimal(subtotal) - as_decimal(discount_amount)
    if taxable_base <= ZERO:
        return ZERO

    return taxable_base * as_decimal(tax_rate) / HUNDRED


def calculate_total(subtotal: Number, discount_amount: Number, tax_amount: Number) -> Decimal:
    return as_decimal(subtotal) - as_decimal(discount_amount) + as_decimal(tax_amount)


def compute_totals(
    items: Iterable[Any],
    discount_type: Union[DiscountType, str],
    discount_value: Number,
    tax_mode: Union[TaxMode, str],
    tax_rate: Number,
) -> InvoiceTotals:
    """
    Compute all monetary fields of an invoice

    Each intermediate amount is rounded to the cent before the next step
    uses it, so the stored values satisfy total = subtotal - discount + tax
    exactly and re-deriving them after a reload gives the same numbers.

    Args:
        items: Line items exposing quantity and unit_price
        discount_type: percentage or fixed
        discount_value: Discount percentage or amount
        tax_mode: IGST, CGST-SGST or No GST
        tax_rate: GST rate in percent

    Returns:
        InvoiceTotals
    """
    subtotal = round_money(calculate_subtotal(items))
    discount_amount = round_money(
        calculate_discount_amount(subtotal, discount_type, discount_value)
    )
    tax_amount = round_money(
        calculate_tax_amount(subtotal, discount_amount, tax_mode, tax_rate)
    )
    total = calculate_total(subtotal, discount_amount, tax_amount)

    return InvoiceTotals(
        subtotal=subtotal,
        discount_amount=discount_amount,
        tax_amount=tax_amount,
        total=total,
    )


def split_tax(
    tax_amount: Number,
    tax_mode: Union[TaxMode, str],
    tax_rate: Number,
) -> List[TaxLine]:
    """
    Split a tax amount into its display lines

    CGST-SGST shows two halves at rate / 2. CGST takes the half rounded to
    the cent and SGST the remainder, so both lines always add up to the
    tax amount.
    """
    tax_amount = as_decimal(tax_amount)
    tax_rate = as_decimal(tax_rate)
    mode = TaxMode(tax_mode)

    if mode == TaxMode.NO_GST or tax_amount <= ZERO:
        return []

    if mode == TaxMode.IGST:
        return [TaxLine(label="IGST", rate=tax_rate, amount=tax_amount)]

    half_rate = tax_rate / 2
    cgst = round_money(tax_amount / 2)
    sgst = tax_amount - cgst
    return [
        TaxLine(label="CGST", rate=half_rate, amount=cgst),
        TaxLine(label="SGST", rate=half_rate, amount=sgst),
    ]
