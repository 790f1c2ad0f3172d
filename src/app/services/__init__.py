from .unit_of_work import UnitOfWork
from .auth_service import AuthService, AuthSession
from .pdf_service import PdfService, InvoiceDocument

__all__ = [
    "UnitOfWork",
    "AuthService",
    "AuthSession",
    "PdfService",
    "InvoiceDocument",
]
