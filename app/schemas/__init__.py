"""
==============================================================================
Schemas Package - Pydantic Models
==============================================================================

Request and response schemas using Pydantic for validation.

This package provides:
- Common: camelCase base model and pagination block
- Product: product/variable/component create, update and read schemas

==============================================================================
"""

from .common import CamelModel, PaginationInfo
from .product import (
    ComponentSchema,
    VariableSchema,
    ProductCreate,
    ProductUpdate,
    ProductRead,
    ProductShort,
)

__all__ = [
    # Common
    "CamelModel",
    "PaginationInfo",
    # Product
    "ComponentSchema",
    "VariableSchema",
    "ProductCreate",
    "ProductUpdate",
    "ProductRead",
    "ProductShort",
]
