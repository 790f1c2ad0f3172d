from typing import Optional
from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession
from src.adapter.repositories import (
    SqlAlchemyClientRepository,
    SqlAlchemyInvoiceItemRepository,
    SqlAlchemyInvoiceRepository,
    SqlAlchemyPaymentSettingRepository,
)
from src.adapter.services.auth_service import SessionAuthService, StaticAuthService
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.app.services.auth_service import AuthService
from src.app.services.invoice_number_service import InvoiceNumberService
from src.app.state import InvoiceContext, InvoiceUseCases, InvoiceWorkspaceState, PaginationState
from src.app.use_cases.invoices import (
    CompanyProfile,
    CreateInvoice,
    DeleteInvoice,
    DuplicateInvoice,
    GetInvoice,
    PaymentInfoDTO,
    SearchInvoices,
    SetInvoiceStatus,
    UpdateInvoice,
    UpdateInvoiceRemark,
)
from src.app.use_cases.settings import GetPaymentInfo, UpdatePaymentInfo

engine: Optional[AsyncEngine] = None
AsyncSessionLocal: Optional[sessionmaker] = None


def init_engine(db_uri: str) -> AsyncEngine:
    """Create the engine and session factory; called once by create_app"""
    global engine, AsyncSessionLocal
    engine = create_async_engine(db_uri, echo=False, future=True)
    AsyncSessionLocal = sessionmaker(
        engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
    )
    return engine


async def create_tables() -> None:
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)


async def dispose_engine() -> None:
    if engine is not None:
        await engine.dispose()


async def get_session() -> AsyncSession:
    if AsyncSessionLocal is None:
        raise RuntimeError("Database engine is not initialised; call init_engine first")
    async with AsyncSessionLocal() as session:
        yield session


async def get_unit_of_work(session: AsyncSession = Depends(get_session)):
    yield SqlAlchemyUnitOfWork(session)


def get_config(request: Request):
    return request.app.state.config


def bearer_token(request: Request) -> Optional[str]:
    header = request.headers.get("Authorization", "")
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer" or not token:
        return None
    return token.strip()


async def get_auth_service(request: Request, config=Depends(get_config)) -> AuthService:
    """
    Resolve the caller's session once per request

    With AUTH_DISABLED every request belongs to AUTH_DEV_USER_ID.
    """
    if config.AUTH_DISABLED:
        return StaticAuthService(config.AUTH_DEV_USER_ID)

    client = request.app.state.auth_client
    token = bearer_token(request)
    session = await client.fetch_session(token) if token else None
    return SessionAuthService(session, client)


def default_payment_info(config) -> PaymentInfoDTO:
    return PaymentInfoDTO(
        account_name=config.DEFAULT_PAYMENT_ACCOUNT_NAME,
        account_number=str(config.DEFAULT_PAYMENT_ACCOUNT_NUMBER),
        ifsc=config.DEFAULT_PAYMENT_IFSC,
    )


def company_profile(config) -> CompanyProfile:
    lines = list(config.COMPANY_ADDRESS_LINES or [])
    if config.COMPANY_PHONE:
        lines.append(f"Phone: {config.COMPANY_PHONE}")
    if config.COMPANY_EMAIL:
        lines.append(f"Email: {config.COMPANY_EMAIL}")
    if config.COMPANY_WEBSITE:
        lines.append(f"Website: {config.COMPANY_WEBSITE}")
    if config.COMPANY_GSTIN:
        lines.append(f"GSTIN: {config.COMPANY_GSTIN}")
    return CompanyProfile(name=config.COMPANY_NAME, lines=lines)


def build_invoice_use_cases(session: AsyncSession, auth_service: AuthService, config) -> InvoiceUseCases:
    """Wire the context's use cases to one store session"""
    uow = SqlAlchemyUnitOfWork(session)
    invoice_repo = SqlAlchemyInvoiceRepository(session)
    client_repo = SqlAlchemyClientRepository(session)
    item_repo = SqlAlchemyInvoiceItemRepository(session)
    payment_repo = SqlAlchemyPaymentSettingRepository(session)
    numbering = InvoiceNumberService(invoice_repo, auth_service)
    defaults = default_payment_info(config)

    return InvoiceUseCases(
        search=SearchInvoices(auth_service, invoice_repo, client_repo, item_repo, payment_repo, defaults),
        get=GetInvoice(auth_service, invoice_repo, payment_repo, defaults),
        create=CreateInvoice(
            uow, auth_service, invoice_repo, client_repo, item_repo, payment_repo, numbering, defaults
        ),
        update=UpdateInvoice(
            uow, auth_service, invoice_repo, client_repo, item_repo, payment_repo, numbering, defaults
        ),
        delete=DeleteInvoice(uow, auth_service, invoice_repo, item_repo),
        duplicate=DuplicateInvoice(
            uow, auth_service, invoice_repo, client_repo, item_repo, payment_repo, numbering, defaults
        ),
        set_status=SetInvoiceStatus(uow, auth_service, invoice_repo, payment_repo, defaults),
        update_remark=UpdateInvoiceRemark(uow, auth_service, invoice_repo, payment_repo, defaults),
        get_payment_info=GetPaymentInfo(auth_service, payment_repo, defaults),
        update_payment_info=UpdatePaymentInfo(uow, auth_service, payment_repo),
    )


async def get_invoice_context(
    request: Request,
    session: AsyncSession = Depends(get_session),
    auth_service: AuthService = Depends(get_auth_service),
    config=Depends(get_config),
) -> InvoiceContext:
    auth_session = auth_service.get_session()
    if auth_session is not None:
        state = request.app.state.workspaces.get(auth_session.user_id)
    else:
        state = InvoiceWorkspaceState(pagination=PaginationState(page_size=int(config.INVOICE_PAGE_SIZE)))

    context = InvoiceContext(
        state,
        build_invoice_use_cases(session, auth_service, config),
        auth_service,
        filter_debounce_seconds=float(config.FILTER_DEBOUNCE_SECONDS),
    )
    try:
        yield context
    finally:
        # Runs before get_session closes the session the use cases are bound to
        context.close()
