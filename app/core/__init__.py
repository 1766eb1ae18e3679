"""
==============================================================================
Core Package
==============================================================================

Core utilities and infrastructure for the application.

Modules:
--------
- exceptions: AppException class, error handlers and factory functions
- dependencies: FastAPI dependency injection functions

Usage:
------
    from app.core import exceptions
    raise exceptions.product_not_found(42)

==============================================================================
"""

from .exceptions import (
    AppException,
    StoreUnavailable,
    register_exception_handlers,
)

__all__ = [
    "AppException",
    "StoreUnavailable",
    "register_exception_handlers",
]
