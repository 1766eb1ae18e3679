"""
==============================================================================
Database Package
==============================================================================

SQLAlchemy infrastructure and ORM models for the product store.

Architecture:
------------
├── database.py   - DatabaseManager class, session factory, get_db
├── models.py     - Product / ProductVariable / ProductComponent
└── init_db.py    - DatabaseInitializer for start-up

Usage:
------
    from app.db import DatabaseInitializer, DatabaseManager, Product

    DatabaseInitializer().initialize()
    with DatabaseManager().session_scope() as session:
        products = session.query(Product).all()

==============================================================================
"""

from .database import DatabaseManager, Base, get_db
from .models import Product, ProductVariable, ProductComponent
from .init_db import DatabaseInitializer

__all__ = [
    # Database management
    "DatabaseManager",
    "Base",
    "get_db",
    # Models
    "Product",
    "ProductVariable",
    "ProductComponent",
    # Initialization
    "DatabaseInitializer",
]
