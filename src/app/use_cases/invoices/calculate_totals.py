"""CalculateInvoiceTotals Use Case

Live recalculation for the invoice form. Nothing is persisted and no
session is needed.
"""

from src.libs.result import Result, Return, Error
from .builders import totals_for
from .dtos import InvoiceCommandDTO, InvoiceTotalsDTO
from .mappers import tax_breakdown_for


class CalculateInvoiceTotals:
    """Use Case: Compute subtotal, discount, tax, total and tax lines of a draft"""

    def execute(self, command: InvoiceCommandDTO) -> Result[InvoiceTotalsDTO]:
        try:
            totals = totals_for(command)
        except (ArithmeticError, ValueError) as e:
            return Return.err(
                Error(code="CALCULATION_FAILED", message="Failed to calculate totals", reason=str(e))
            )

        return Return.ok(
            InvoiceTotalsDTO(
                subtotal=totals.subtotal,
                discount_amount=totals.discount_amount,
                tax_amount=totals.tax_amount,
                total=totals.total,
                tax_breakdown=tax_breakdown_for(totals.tax_amount, command.tax_mode, command.tax_rate),
            )
        )
