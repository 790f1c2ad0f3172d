"""Invoice Validation

Checks that block saving or exporting an invoice. Problems are collected
rather than failing on the first one so the user sees all of them at once.
"""

from typing import List, Optional

from src.libs.result import Error
from src.app.services.invoice_number_service import InvoiceNumberService
from .dtos import InvoiceCommandDTO, ValidationIssueDTO


def validate_invoice_fields(command: InvoiceCommandDTO) -> List[ValidationIssueDTO]:
    issues: List[ValidationIssueDTO] = []

    if not command.invoice_number.strip():
        issues.append(ValidationIssueDTO(field="invoice_number", message="Invoice number is required"))

    if not command.client.name.strip():
        issues.append(ValidationIssueDTO(field="client.name", message="Client name is required"))

    if command.due_date < command.issue_date:
        issues.append(
            ValidationIssueDTO(field="due_date", message="Due date cannot be before the invoice date")
        )

    if not command.items:
        issues.append(ValidationIssueDTO(field="items", message="At least one line item is required"))

    for index, item in enumerate(command.items):
        if not item.description.strip():
            issues.append(
                ValidationIssueDTO(field=f"items[{index}].description", message="Item description is required")
            )
        if item.quantity <= 0:
            issues.append(
                ValidationIssueDTO(field=f"items[{index}].quantity", message="Quantity must be greater than zero")
            )
        if item.unit_price < 0:
            issues.append(
                ValidationIssueDTO(field=f"items[{index}].unit_price", message="Unit price cannot be negative")
            )

    return issues


async def validate_invoice(
    command: InvoiceCommandDTO,
    numbering: InvoiceNumberService,
    exclude_id: Optional[str] = None,
) -> List[ValidationIssueDTO]:
    """
    Field checks plus the invoice number uniqueness check

    Args:
        command: Invoice being saved or exported
        numbering: Used for the uniqueness check
        exclude_id: ID of the invoice being edited, so it does not collide with itself

    Returns:
        List of problems, empty when the invoice is valid
    """
    issues = validate_invoice_fields(command)

    number = command.invoice_number.strip()
    if number and not await numbering.is_invoice_number_unique(number, exclude_id=exclude_id):
        issues.append(
            ValidationIssueDTO(
                field="invoice_number",
                message=f"Invoice number {number} is already in use",
            )
        )

    return issues


def validation_error(issues: List[ValidationIssueDTO]) -> Error:
    return Error(
        code="VALIDATION_FAILED",
        message="; ".join(issue.message for issue in issues),
        reason="Invoice failed validation",
        details=[issue.model_dump() for issue in issues],
    )
