"""
==============================================================================
Database Initialization Module
==============================================================================

Store bootstrap shared by the API server and the batch loader.

Initialization Flow:
-------------------
1. Verify the store is reachable (fatal if not)
2. Create all tables from ORM models
3. Log initialization status

Usage:
------
    from app.db import DatabaseInitializer
    DatabaseInitializer().initialize()

==============================================================================
"""

from __future__ import annotations

import logging
from typing import Optional

from app.core.exceptions import StoreUnavailable
from app.db.database import DatabaseManager


# Module logger
logger = logging.getLogger(__name__)


class DatabaseInitializer:
    """
    Database initialization manager.

    Example:
        >>> initializer = DatabaseInitializer()
        >>> initializer.initialize()
    """

    def __init__(self, db_manager: Optional[DatabaseManager] = None) -> None:
        """
        Args:
            db_manager: Optional DatabaseManager instance (singleton if None)
        """
        self._db_manager = db_manager or DatabaseManager()

    def create_tables(self) -> None:
        """Create all database tables (idempotent)."""
        logger.info("Creating database tables...")
        self._db_manager.create_tables()
        logger.info("✅ Database tables created successfully")

    def verify_connection(self) -> None:
        """
        Check that the store answers.

        Raises:
            StoreUnavailable: If no connection can be made
        """
        if not self._db_manager.verify_connection():
            raise StoreUnavailable(f"Cannot connect to the product store: {self._db_manager!r}")
        logger.info("✅ Database connection verified")

    def initialize(self) -> None:
        """
        Perform full database initialization.

        Raises:
            StoreUnavailable: If the store cannot be reached
        """
        logger.info("=" * 60)
        logger.info("Initializing database...")
        logger.info("=" * 60)

        self.verify_connection()
        self.create_tables()

        logger.info("Database initialization complete")

