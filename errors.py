import logging
import traceback
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException

from config import settings

log = logging.getLogger(__name__)


class AppError(Exception):
    status_code: int = 500

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        errors: list[dict[str, Any]] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        self.errors = errors


class ValidationError(AppError):
    status_code = 400


class AuthenticationError(AppError):
    status_code = 401


class NotFoundError(AppError):
    status_code = 404


class ConflictError(AppError):
    """Duplicate value for a unique field"""

    status_code = 400


class InternalError(AppError):
    status_code = 500


def error_body(message: str, errors: list[dict[str, Any]] | None = None) -> dict[str, Any]:
    body: dict[str, Any] = {"success": False, "message": message}
    if errors is not None:
        body["errors"] = errors
    return body


def _field_errors(exc: RequestValidationError) -> list[dict[str, Any]]:
    errors = []
    for err in exc.errors():
        loc = [str(part) for part in err.get("loc", ()) if part not in ("body", "query", "path")]
        errors.append({"field": ".".join(loc), "message": err.get("msg", "Invalid value")})
    return errors


def _log_server_error(request: Request, exc: BaseException) -> None:
    log.error(
        "Error occurred method=%s url=%s user_id=%s ip=%s",
        request.method,
        request.url,
        getattr(request.state, "user_id", None),
        request.client.host if request.client else None,
        exc_info=(type(exc), exc, exc.__traceback__),
    )


def _server_error_response(message: str, exc: BaseException, status_code: int = 500) -> JSONResponse:
    body = error_body(message)
    if settings.debug:
        body["stack"] = "".join(traceback.format_exception(exc))
    return JSONResponse(status_code=status_code, content=body)


def register_exception_handlers(app: FastAPI) -> None:

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError):
        if exc.status_code >= 500:
            _log_server_error(request, exc.__cause__ or exc)
            return _server_error_response(exc.message, exc.__cause__ or exc, exc.status_code)
        return JSONResponse(status_code=exc.status_code, content=error_body(exc.message, exc.errors))

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        errors = _field_errors(exc)
        log.warning("Validation errors method=%s url=%s errors=%s", request.method, request.url.path, errors)
        return JSONResponse(status_code=400, content=error_body("Validation failed", errors))

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        if exc.status_code == 404:
            log.warning("Route not found method=%s url=%s", request.method, request.url.path)
            message = "Route not found"
        else:
            message = str(exc.detail or "HTTP error")
        return JSONResponse(status_code=exc.status_code, content=error_body(message), headers=exc.headers)

    @app.exception_handler(RateLimitExceeded)
    async def rate_limit_handler(request: Request, exc: RateLimitExceeded):
        log.warning("Rate limit exceeded ip=%s limit=%s", request.client.host if request.client else None, exc.detail)
        return JSONResponse(
            status_code=429,
            content=error_body("Too many requests from this IP, please try again later."),
        )

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        _log_server_error(request, exc)
        return _server_error_response("Server Error", exc)
