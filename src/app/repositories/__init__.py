from .invoice_repository import InvoiceRepository, InvoiceQueryCriteria, InvoiceRow
from .client_repository import ClientRepository
from .invoice_item_repository import InvoiceItemRepository
from .payment_setting_repository import PaymentSettingRepository

__all__ = [
    "InvoiceRepository",
    "InvoiceQueryCriteria",
    "InvoiceRow",
    "ClientRepository",
    "InvoiceItemRepository",
    "PaymentSettingRepository",
]
