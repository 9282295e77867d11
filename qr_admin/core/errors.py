from __future__ import annotations

import logging

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class InvariantViolation(RuntimeError):
    """A stored record breaks an assumption the code relies on.

    Raised for data that should never have been persisted (for example a cart
    QR code whose variant id is not a ProductVariant gid). It is not a
    user-correctable error and is never converted into a form error.
    """


class CatalogQueryError(RuntimeError):
    """The remote product catalog could not answer a query."""


def invariant(condition: object, message: str) -> None:
    if not condition:
        raise InvariantViolation(message)


def _error_response(request: Request, status_code: int, code: str, message: str, headers=None):
    request_id = getattr(request.state, "request_id", None)
    return JSONResponse(
        status_code=status_code,
        content={
            "error": {
                "code": code,
                "message": message,
                "request_id": request_id,
            }
        },
        headers=headers,
    )


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        return _error_response(request, 422, "validation_error", "Invalid request payload.")

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException):
        return _error_response(
            request, exc.status_code, "http_error", str(exc.detail), headers=exc.headers
        )

    @app.exception_handler(CatalogQueryError)
    async def catalog_exception_handler(request: Request, exc: CatalogQueryError):
        logger.error("Catalog query failed: %s", exc)
        return _error_response(
            request, 502, "catalog_unavailable", "Product catalog is unavailable. Retry later."
        )

    @app.exception_handler(InvariantViolation)
    async def invariant_exception_handler(request: Request, exc: InvariantViolation):
        logger.exception("Invariant violation: %s", exc)
        return _error_response(
            request, 500, "invariant_violation", "Stored QR code data is inconsistent."
        )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.exception("Unhandled server error: %s", exc)
        return _error_response(
            request,
            500,
            "internal_server_error",
            "Unexpected server error. Contact support with request_id.",
        )
