"""
==============================================================================
Configuration Package
==============================================================================

Environment-driven settings shared by the API server and the batch loader.

Usage:
------
    from app.config import get_settings

    settings = get_settings()
    print(settings.database_url)
    print(settings.products_path)

==============================================================================
"""

from .settings import Settings, get_settings

__all__ = [
    "Settings",
    "get_settings",
]
