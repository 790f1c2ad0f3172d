"""API error responses

Every error leaves the API as {"error": {"code": ..., "message": ...}},
with a "details" list when there is more than one problem to report.
"""

import logging
from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from src.libs.result import Error

logger = logging.getLogger(__name__)


class ClientError(Exception):
    """Raised by routes to turn a use case Error into an HTTP response"""

    def __init__(self, error: Error, status_code: int = status.HTTP_400_BAD_REQUEST):
        super().__init__(error.message)
        self.error = error
        self.status_code = status_code


STATUS_BY_CODE = {
    "NO_ACTIVE_SESSION": status.HTTP_401_UNAUTHORIZED,
    "VALIDATION_FAILED": status.HTTP_422_UNPROCESSABLE_ENTITY,
    "INVOICE_NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "INVALID_DATE_RANGE": status.HTTP_400_BAD_REQUEST,
}


def status_for(error: Error) -> int:
    """HTTP status for a use case error; store failures map to 500"""
    if error.code in STATUS_BY_CODE:
        return STATUS_BY_CODE[error.code]
    if error.code.endswith("_FAILED"):
        return status.HTTP_500_INTERNAL_SERVER_ERROR
    return status.HTTP_400_BAD_REQUEST


def raise_for_error(error: Error) -> None:
    raise ClientError(error, status_code=status_for(error))


def error_body(error: Error) -> dict:
    body = {"code": error.code, "message": error.message}
    if error.details:
        body["details"] = error.details
    return {"error": body}


async def client_error_handler(request: Request, exc: ClientError) -> JSONResponse:
    if exc.error.reason:
        logger.info(f"{request.method} {request.url.path} -> {exc.error.code}: {exc.error.reason}")
    return JSONResponse(status_code=exc.status_code, content=error_body(exc.error))


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    details = [
        {
            "field": ".".join(str(part) for part in issue.get("loc", ()) if part != "body"),
            "message": issue.get("msg", ""),
        }
        for issue in exc.errors()
    ]
    error = Error(
        code="VALIDATION_FAILED",
        message="; ".join(f"{d['field']}: {d['message']}" for d in details),
        details=details,
    )
    return JSONResponse(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, content=error_body(error))


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(f"Unhandled exception on {request.method} {request.url.path}: {exc}", exc_info=True)
    error = Error(code="INTERNAL_ERROR", message="Internal server error")
    return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=error_body(error))
