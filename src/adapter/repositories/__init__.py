from .invoice_repository import SqlAlchemyInvoiceRepository
from .client_repository import SqlAlchemyClientRepository
from .invoice_item_repository import SqlAlchemyInvoiceItemRepository
from .payment_setting_repository import SqlAlchemyPaymentSettingRepository

__all__ = [
    "SqlAlchemyInvoiceRepository",
    "SqlAlchemyClientRepository",
    "SqlAlchemyInvoiceItemRepository",
    "SqlAlchemyPaymentSettingRepository",
]
