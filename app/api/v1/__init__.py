"""
==============================================================================
API v1 Endpoints
==============================================================================

Routers:
--------
- health: Liveness and readiness endpoints
- products: Product CRUD, search and bulk operations

==============================================================================
"""

from . import health, products

__all__ = ["health", "products"]
