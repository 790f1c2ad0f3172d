from .base import BaseModel, generate_uuid
from .client import Client
from .invoice_item import InvoiceItem
from .invoice import Invoice, InvoiceStatus, PaymentType, DiscountType, TaxMode
from .payment_setting import PaymentSetting

__all__ = [
    "BaseModel",
    "generate_uuid",
    "Client",
    "InvoiceItem",
    "Invoice",
    "InvoiceStatus",
    "PaymentType",
    "DiscountType",
    "TaxMode",
    "PaymentSetting",
]
