from decimal import Decimal

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import OperationalError

from app.cashup.core.error_catalog import AppError, ErrorCatalog


_HTTP_STATUS_CODES = {
    400: "BAD_REQUEST",
    404: "NOT_FOUND",
    405: "METHOD_NOT_ALLOWED",
    409: "CONFLICT",
}


def _set_error_context(request: Request, code: str, exc: Exception | None = None) -> None:
    request.state.error_code = code
    if exc is not None:
        request.state.error_class = exc.__class__.__name__


def _is_lock_timeout(exc: Exception) -> bool:
    if isinstance(exc, OperationalError):
        message = str(exc).lower()
        return any(
            token in message
            for token in (
                "lock timeout",
                "deadlock detected",
                "database is locked",
                "could not obtain lock",
            )
        )
    return False


def _trace_id(request: Request) -> str:
    return getattr(request.state, "trace_id", "")


def _json_safe(value):
    if isinstance(value, Decimal):
        return format(value, "f")
    if isinstance(value, dict):
        return {key: _json_safe(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_json_safe(item) for item in value]
    return value


def _validation_error_details(exc: RequestValidationError) -> dict:
    errors = []
    for error in exc.errors():
        loc = list(error.get("loc", []))
        field = ".".join(str(item) for item in loc if item not in {"body", "query", "path", "header"}) or None
        errors.append(
            {
                "field": field,
                "message": error.get("msg", "Invalid value"),
                "type": error.get("type", "validation_error"),
                "loc": loc,
                "input": _json_safe(error.get("input")),
            }
        )
    return {"errors": errors}


def _http_error_payload(request: Request, exc: HTTPException) -> dict:
    detail = exc.detail
    message = str(detail) if detail is not None else "HTTP error"
    details = None
    if isinstance(detail, dict):
        message = str(detail.get("message", message))
        details = {key: value for key, value in detail.items() if key != "message"} or None
    elif isinstance(detail, list):
        details = {"errors": detail}
    return {
        "code": _HTTP_STATUS_CODES.get(exc.status_code, "HTTP_ERROR"),
        "message": message,
        "details": details,
        "trace_id": _trace_id(request),
    }


def error_response(code: str, message: str, details: object, trace_id: str, status_code: int) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "code": code,
            "message": message,
            "details": details,
            "trace_id": trace_id,
        },
    )


def _catalog_response(request: Request, error, details: object) -> JSONResponse:
    return error_response(error.code, error.message, details, _trace_id(request), error.status_code)


def setup_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError):
        _set_error_context(request, exc.error.code, exc)
        return _catalog_response(request, exc.error, exc.details)

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException):
        payload = _http_error_payload(request, exc)
        _set_error_context(request, payload["code"], exc)
        return JSONResponse(status_code=exc.status_code, content=payload)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        _set_error_context(request, ErrorCatalog.VALIDATION_ERROR.code, exc)
        return _catalog_response(request, ErrorCatalog.VALIDATION_ERROR, _validation_error_details(exc))

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        if _is_lock_timeout(exc):
            _set_error_context(request, ErrorCatalog.LOCK_TIMEOUT.code, exc)
            return _catalog_response(request, ErrorCatalog.LOCK_TIMEOUT, {"type": exc.__class__.__name__})
        _set_error_context(request, ErrorCatalog.INTERNAL_ERROR.code, exc)
        return _catalog_response(request, ErrorCatalog.INTERNAL_ERROR, {"type": exc.__class__.__name__})
