import logging

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from starlette.exceptions import HTTPException

from app.core.config import settings

logger = logging.getLogger(__name__)


class SeedError(Exception):
    """A seeding phase failed; the whole run has been rolled back."""

    def __init__(self, phase: str, rows_inserted: int, cause: BaseException):
        self.phase = phase
        self.rows_inserted = rows_inserted
        self.cause = cause
        super().__init__(f"Seeding failed during '{phase}' after {rows_inserted} rows: {cause}")


class SchemaInitError(Exception):
    """Schema initialization failed; the DDL transaction has been rolled back."""

    def __init__(self, step: str, cause: BaseException):
        self.step = step
        self.cause = cause
        super().__init__(f"Schema initialization failed during '{step}': {cause}")


def _error_body(error: str, message: str | None = None, details=None) -> dict:
    body = {"error": error}
    if message is not None:
        body["message"] = message
    if details is not None:
        body["details"] = details
    return body


def _log(request: Request, status_code: int, exc: BaseException):
    meta = {"path": request.url.path, "method": request.method, "status": status_code}
    if status_code >= 500:
        logger.error("Request failed: %s", exc, exc_info=exc, extra={"meta": meta})
    else:
        logger.warning("Request rejected: %s", exc, extra={"meta": meta})


async def validation_error_handler(request: Request, exc: RequestValidationError):
    _log(request, status.HTTP_422_UNPROCESSABLE_ENTITY, exc)
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content=_error_body("validation_error", details=jsonable_encoder(exc.errors())),
    )


async def http_error_handler(request: Request, exc: HTTPException):
    if exc.status_code == status.HTTP_401_UNAUTHORIZED:
        error = "unauthorized"
    elif exc.status_code == status.HTTP_404_NOT_FOUND:
        error = "not_found"
    else:
        error = "http_error"
    _log(request, exc.status_code, exc)
    return JSONResponse(status_code=exc.status_code, content=_error_body(error, str(exc.detail)), headers=exc.headers)


async def integrity_error_handler(request: Request, exc: IntegrityError):
    _log(request, status.HTTP_409_CONFLICT, exc)
    return JSONResponse(
        status_code=status.HTTP_409_CONFLICT,
        content=_error_body("database_conflict", "Record already exists"),
    )


async def database_error_handler(request: Request, exc: SQLAlchemyError):
    _log(request, status.HTTP_500_INTERNAL_SERVER_ERROR, exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_error_body("database_error", "Database operation failed"),
    )


async def internal_error_handler(request: Request, exc: Exception):
    _log(request, status.HTTP_500_INTERNAL_SERVER_ERROR, exc)
    message = "Internal server error" if settings.is_production else str(exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_error_body("internal_error", message),
    )


def register_exception_handlers(app: FastAPI):
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(HTTPException, http_error_handler)
    app.add_exception_handler(IntegrityError, integrity_error_handler)
    app.add_exception_handler(SQLAlchemyError, database_error_handler)
    app.add_exception_handler(Exception, internal_error_handler)
