"""
==============================================================================
Services Package - Business Logic Layer
==============================================================================

Service classes sitting between the API controllers / batch loader and
the ORM.

    ┌─────────────────┐   ┌─────────────────┐
    │   API Router    │   │  Batch Loader   │
    └────────┬────────┘   └────────┬────────┘
             └──────────┬──────────┘
               ┌────────▼────────┐
               │ ProductService  │  ← Store operations
               └────────┬────────┘
               ┌────────▼────────┐
               │   ORM models    │
               └─────────────────┘

Usage:
------
    from app.services import ProductService

    service = ProductService(db_session)
    product = service.get_by_id(42)

==============================================================================
"""

from .product_service import ProductService

__all__ = [
    "ProductService",
]
