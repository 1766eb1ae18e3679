"""
==============================================================================
FastAPI Dependencies Module
==============================================================================

Dependency injection helpers shared by the API routes.

This module provides:
- get_db: request-scoped SQLAlchemy session (re-exported from app.db)
- Pagination: page/limit/offset bundle
- get_pagination: query-parameter parser for paginated endpoints
- get_product_id: path-parameter parser for /products/{product_id}

Query and path numbers are read leniently: leading digits are used
("12abc" is 12) and anything unreadable falls back to a default
instead of failing the request.

Usage:
------
    @router.get("")
    async def list_items(
        pagination: Pagination = Depends(get_pagination),
        db: Session = Depends(get_db),
    ):
        ...

==============================================================================
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Dict, Optional

from fastapi import Path, Query

from app.config import get_settings
from app.core import exceptions
from app.db.database import get_db
from app.schemas.common import PaginationInfo


__all__ = ["get_db", "Pagination", "get_pagination", "get_product_id", "parse_int"]


_LEADING_INT = re.compile(r"\s*([+-]?\d+)")

# Largest value a 64-bit INTEGER column can hold
_MAX_ID = 2 ** 63 - 1


def parse_int(value: Optional[str]) -> Optional[int]:
    """
    Read the integer at the start of ``value``.

    Returns:
        The parsed integer, or None when ``value`` does not start with one

    Example:
        >>> parse_int(" 42abc")
        42
        >>> parse_int("abc") is None
        True
    """
    if value is None:
        return None
    match = _LEADING_INT.match(value)
    return int(match.group(1)) if match else None


@dataclass(frozen=True)
class Pagination:
    """
    Resolved pagination parameters for one request.

    Attributes:
        page: Page number (1-indexed)
        limit: Items per page
    """

    page: int
    limit: int

    @property
    def offset(self) -> int:
        """Number of rows to skip for this page."""
        return (self.page - 1) * self.limit

    def describe(self, total: int) -> Dict[str, Any]:
        """Build the ``pagination`` block returned alongside a page of items."""
        info = PaginationInfo(
            current_page=self.page,
            total_pages=(total + self.limit - 1) // self.limit,
            total_items=total,
            items_per_page=self.limit,
        )
        return info.model_dump(by_alias=True)


def get_pagination(
    page: Optional[str] = Query(None, description="Page number (default 1)"),
    limit: Optional[str] = Query(None, description="Items per page"),
) -> Pagination:
    """
    FastAPI dependency for pagination parameters.

    A missing, unreadable or non-positive ``page`` means page 1, and the
    same for ``limit`` means the configured default page size. ``limit`` is
    capped at the configured maximum.
    """
    settings = get_settings()

    page_size = parse_int(limit)
    if page_size is None or page_size < 1:
        page_size = settings.default_page_size
    page_size = min(page_size, settings.max_page_size)

    page_number = parse_int(page)
    if page_number is None or page_number < 1:
        page_number = 1
    # keep the row offset within INTEGER range
    page_number = min(page_number, _MAX_ID // page_size)

    return Pagination(page=page_number, limit=page_size)


def get_product_id(product_id: str = Path(..., description="Product id")) -> int:
    """
    FastAPI dependency resolving the ``{product_id}`` path segment.

    Raises:
        AppException: PRODUCT_NOT_FOUND if the segment is not a storable number
    """
    parsed = parse_int(product_id)
    if parsed is None or abs(parsed) > _MAX_ID:
        raise exceptions.product_not_found()
    return parsed
