from .unit_of_work import SqlAlchemyUnitOfWork
from .pdf_service import ReportLabPdfService
from .auth_service import HostedAuthClient, SessionAuthService, StaticAuthService

__all__ = [
    "SqlAlchemyUnitOfWork",
    "ReportLabPdfService",
    "HostedAuthClient",
    "SessionAuthService",
    "StaticAuthService",
]
