"""Invoice use cases"""
from .create_invoice import CreateInvoice
from .update_invoice import UpdateInvoice
from .inline_edits import SetInvoiceStatus, UpdateInvoiceRemark
from .delete_invoice import DeleteInvoice
from .duplicate_invoice import DuplicateInvoice
from .get_invoice import GetInvoice
from .search_invoices import SearchInvoices
from .export_invoice_pdf import ExportInvoicePdf
from .calculate_totals import CalculateInvoiceTotals
from .invoice_numbers import GetNextInvoiceNumber, CheckInvoiceNumber
from .document import CompanyProfile
from .dtos import (
    ClientDTO,
    LineItemDTO,
    PaymentInfoDTO,
    TaxLineDTO,
    InvoiceTotalsDTO,
    InvoiceCommandDTO,
    InvoiceDTO,
    InvoiceSearchFiltersDTO,
    InvoiceSearchResultDTO,
    SearchStrategy,
    DuplicateInvoiceResultDTO,
    InvoiceNumberDTO,
    InvoiceNumberAvailabilityDTO,
    InvoicePdfDTO,
    ValidationIssueDTO,
)

__all__ = [
    "CreateInvoice",
    "UpdateInvoice",
    "SetInvoiceStatus",
    "UpdateInvoiceRemark",
    "DeleteInvoice",
    "DuplicateInvoice",
    "GetInvoice",
    "SearchInvoices",
    "ExportInvoicePdf",
    "CalculateInvoiceTotals",
    "GetNextInvoiceNumber",
    "CheckInvoiceNumber",
    "CompanyProfile",
    "ClientDTO",
    "LineItemDTO",
    "PaymentInfoDTO",
    "TaxLineDTO",
    "InvoiceTotalsDTO",
    "InvoiceCommandDTO",
    "InvoiceDTO",
    "InvoiceSearchFiltersDTO",
    "InvoiceSearchResultDTO",
    "SearchStrategy",
    "DuplicateInvoiceResultDTO",
    "InvoiceNumberDTO",
    "InvoiceNumberAvailabilityDTO",
    "InvoicePdfDTO",
    "ValidationIssueDTO",
]
