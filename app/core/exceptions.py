"""
Application Exception Handling

Single AppException class for all request errors with FastAPI integration,
plus the handlers that keep every error response in the
``{"success": false, "error": "<message>"}`` shape.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException


logger = logging.getLogger(__name__)


class AppException(Exception):
    """
    Unified application exception for all request error scenarios.

    Usage:
        raise AppException("Product not found", "PRODUCT_NOT_FOUND", 404)
        raise AppException("Failed to fetch products", "STORE_ERROR", 500)

    Error Codes:
        Product:
            - PRODUCT_NOT_FOUND (404)
            - PRODUCT_EXISTS (400)

        Request:
            - VALIDATION_ERROR (400)
            - SEARCH_QUERY_REQUIRED (400)

        General:
            - STORE_ERROR (500)
    """

    def __init__(
        self,
        message: str,
        code: str,
        status_code: int = 400,
        details: Optional[Dict[str, Any]] = None
    ):
        """
        Initialize application exception.

        Args:
            message: Human-readable error message
            code: Machine-readable error code (e.g., "PRODUCT_NOT_FOUND")
            status_code: HTTP status code (default: 400)
            details: Additional error context, logged but not returned
        """
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details or {}
        self.timestamp = datetime.now(timezone.utc).isoformat()
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for JSON response."""
        return {
            "success": False,
            "error": self.message,
        }


class StoreUnavailable(RuntimeError):
    """Raised at start-up when the record store cannot be reached."""


# ============================================
# HANDLERS
# ============================================

async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    """Convert AppException to the JSON error response."""
    if exc.status_code >= 500:
        logger.error(f"{exc.code} on {request.method} {request.url.path}: {exc.message} {exc.details}")
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict()
    )


async def validation_exception_handler(
    request: Request,
    exc: RequestValidationError
) -> JSONResponse:
    """Report request validation failures as 400 with a readable message."""
    return JSONResponse(
        status_code=400,
        content=validation_error(describe_validation_errors(exc.errors())).to_dict()
    )


async def http_exception_handler(
    request: Request,
    exc: StarletteHTTPException
) -> JSONResponse:
    """
    Map framework HTTP errors to JSON.

    A known path requested with an unregistered method is an unmatched
    route too, so 405 is answered like 404.
    """
    if exc.status_code in (404, 405):
        return JSONResponse(status_code=404, content={"error": "Route not found"})
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "error": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Last-resort handler for anything the controllers did not convert."""
    logger.exception(f"Unhandled error on {request.method} {request.url.path}: {exc}")
    return JSONResponse(status_code=500, content={"error": "Something went wrong!"})


def register_exception_handlers(app: FastAPI) -> None:
    """
    Register all exception handlers with FastAPI app.

    Args:
        app: FastAPI application instance
    """
    app.add_exception_handler(AppException, app_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)


def describe_validation_errors(errors) -> str:
    """Flatten pydantic error dicts into ``"loc: msg; loc: msg"``."""
    parts = []
    for error in errors:
        location = ".".join(str(item) for item in error.get("loc", ()))
        message = error.get("msg", "Invalid value")
        parts.append(f"{location}: {message}" if location else message)
    return "; ".join(parts) or "Invalid request"


# ============================================
# CONVENIENCE FACTORY FUNCTIONS
# ============================================

def product_not_found(product_id: Optional[int] = None) -> AppException:
    """Create product not found exception."""
    details = {"product_id": product_id} if product_id is not None else {}
    return AppException("Product not found", "PRODUCT_NOT_FOUND", 404, details)


def product_exists(product_id: int) -> AppException:
    """Create duplicate product id exception."""
    return AppException(
        "Product with this ID already exists",
        "PRODUCT_EXISTS",
        400,
        {"product_id": product_id}
    )


def validation_error(message: str) -> AppException:
    """Create validation error exception."""
    return AppException(message, "VALIDATION_ERROR", 400)


def search_query_required() -> AppException:
    """Create missing search query exception."""
    return AppException("Search query is required", "SEARCH_QUERY_REQUIRED", 400)


def store_error(message: str, cause: Optional[Exception] = None) -> AppException:
    """Create store failure exception, keeping the cause for the log."""
    details = {"cause": str(cause)} if cause is not None else {}
    return AppException(message, "STORE_ERROR", 500, details)