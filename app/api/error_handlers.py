"""Exception handlers that turn every failure into one JSON error envelope."""
import logging
import traceback
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.config import get_settings
from app.errors import CatalogError
from app.logging_config import mask_sensitive_data

GENERIC_SERVER_ERROR = "Something went wrong on the server"

logger = logging.getLogger(__name__)


def _request_context(request: Request) -> dict:
    context = {
        "method": request.method,
        "path": request.url.path,
        "query": dict(request.query_params),
    }
    if get_settings().is_production:
        return mask_sensitive_data(context)
    return context


def _error_response(
    request: Request,
    exc: Exception,
    status_code: int,
    message: str,
    errors: Optional[list[str]] = None,
    headers: Optional[dict] = None,
) -> JSONResponse:
    """
    Build the error envelope for a failure and log it.

    Never raises: if anything goes wrong while building the envelope a
    bare 500 envelope is returned instead.
    """
    try:
        settings = get_settings()
        context = _request_context(request)

        if status_code >= 500:
            logger.error(
                f"💥 Application error {status_code}: {message} {context}",
                exc_info=(type(exc), exc, exc.__traceback__),
            )
        else:
            logger.warning(f"⚠️ Request failed {status_code}: {message} {context}")

        if status_code >= 500 and not settings.is_development:
            message = GENERIC_SERVER_ERROR

        body = {"status": "error", "message": message}
        if errors:
            body["errors"] = errors
        if settings.is_development and exc.__traceback__ is not None:
            body["stack"] = "".join(
                traceback.format_exception(type(exc), exc, exc.__traceback__)
            )

        return JSONResponse(status_code=status_code, content=body, headers=headers)
    except Exception:
        logger.exception("❌ Failed to build error response")
        return JSONResponse(
            status_code=500,
            content={"status": "error", "message": GENERIC_SERVER_ERROR},
        )


async def catalog_error_handler(request: Request, exc: CatalogError) -> JSONResponse:
    return _error_response(request, exc, exc.status_code, exc.message, exc.errors)


async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Malformed JSON bodies and undecodable parameters."""
    errors = [
        f"{'.'.join(str(part) for part in error.get('loc', ()))}: {error.get('msg')}"
        for error in exc.errors()
    ]
    return _error_response(request, exc, 400, "Validation failed", errors)


async def http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    """Framework HTTP errors, including unmatched routes."""
    if exc.status_code == 404:
        message = f"Can't find {request.url.path} on this server!"
    else:
        message = str(exc.detail)
    return _error_response(
        request, exc, exc.status_code, message, headers=getattr(exc, "headers", None)
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    return _error_response(request, exc, 500, str(exc) or GENERIC_SERVER_ERROR)


def register_exception_handlers(app: FastAPI) -> None:
    """Install the error normalizer on an application."""
    app.add_exception_handler(CatalogError, catalog_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
