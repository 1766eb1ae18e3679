"""
==============================================================================
Main API Router
==============================================================================

Combines the product routes under the /api prefix. Health endpoints live
at the application root (/health) and are registered separately.

==============================================================================
"""

from fastapi import APIRouter

from app.api.v1 import health, products


class MainAPIRouter:
    """
    Main API router combining the resource routes.

    Provides a single entry point for all /api endpoints.
    """

    def __init__(self):
        """Initialize the main router with all sub-routers."""
        self._router = APIRouter(prefix="/api")
        self._include_routers()

    def _include_routers(self) -> None:
        """Include resource routers."""
        self._router.include_router(products.router)

    @property
    def router(self):
        """Get the FastAPI router instance."""
        return self._router


# Create main API router instance
api_router = MainAPIRouter().router
health_router = health.router
