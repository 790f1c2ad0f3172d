import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from config import validate_config
from src.adapter.services.auth_service import HostedAuthClient
from src.api.error import (
    ClientError,
    client_error_handler,
    request_validation_handler,
    unhandled_error_handler,
)
from src.api.middleware import RequestLoggingMiddleware
from src.api.routes import auth, invoices, reports, settings
from src.app.state import WorkspaceRegistry
from src.depends import create_tables, dispose_engine, init_engine

logger = logging.getLogger(__name__)


def create_app(config) -> FastAPI:
    """
    Build the API application

    Args:
        config: ApplicationConfig or a subclass

    Raises:
        ConfigurationError: when required settings are missing
    """
    validate_config(config)

    logging.basicConfig(
        level=str(config.LOG_LEVEL).upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    init_engine(config.DB_URI)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if config.AUTO_CREATE_TABLES:
            await create_tables()
            logger.info("Database tables created")
        yield
        await dispose_engine()

    app = FastAPI(
        title="Invoice Desk API",
        description="GST invoices: create, edit, search, export as PDF and report on revenue",
        version="1.0.0",
        lifespan=lifespan,
    )

    app.state.config = config
    app.state.workspaces = WorkspaceRegistry(page_size=int(config.INVOICE_PAGE_SIZE))
    app.state.auth_client = HostedAuthClient(
        config.AUTH_URL or "",
        config.AUTH_API_KEY,
        timeout=float(config.AUTH_TIMEOUT_SECONDS),
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.CORS_ORIGINS,
        allow_credentials=config.CORS_ALLOW_CREDENTIALS,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    if config.ENABLE_LOGGING_MIDDLEWARE:
        app.add_middleware(RequestLoggingMiddleware)

    app.add_exception_handler(ClientError, client_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    prefix = config.API_PREFIX or ""
    app.include_router(invoices.router, prefix=prefix)
    app.include_router(settings.router, prefix=prefix)
    app.include_router(reports.router, prefix=prefix)
    app.include_router(auth.router, prefix=prefix)

    @app.get("/health", tags=["Health"])
    async def health():
        return {"status": "ok"}

    return app
