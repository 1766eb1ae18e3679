"""
==============================================================================
SQLAlchemy ORM Models Module
==============================================================================

ORM models for the product store.

This module defines:
- Product: Sellable item, keyed by the supplier product id
- ProductVariable: Configurable option group on a product
- ProductComponent: Ingredient/part offered by a variable

Database Schema:
---------------

    ┌─────────────────────────────────────────────────────────────────┐
    │                           products                               │
    ├─────────────────────────────────────────────────────────────────┤
    │ id (INTEGER, PK, supplier id)                                   │
    │ name, unit, enabled (VARCHAR, NOT NULL)                         │
    │ unit_price (FLOAT, NOT NULL)                                    │
    │ barcode, detail, href (VARCHAR/TEXT, NOT NULL, DEFAULT '')      │
    │ salesgroup, group_id, type (INTEGER, NULLABLE)                  │
    │ highlighted, manufactured, product_resale (VARCHAR, NULLABLE)   │
    │ last_cost (FLOAT, NULLABLE)                                     │
    │ created_at, updated_at (DATETIME)                               │
    └─────────────────────────────────────────────────────────────────┘
                                    │
                                    │ 1:N (CASCADE DELETE, ordered)
                                    ▼
    ┌─────────────────────────────────────────────────────────────────┐
    │                      product_variables                           │
    ├─────────────────────────────────────────────────────────────────┤
    │ pk (INTEGER, PK, AUTO INCREMENT)                                │
    │ product_id (INTEGER, FK → products.id)                          │
    │ position (INTEGER)                                              │
    │ variable_id, name, required, quantity, maximum,                 │
    │ quantity_maximum                                                │
    └─────────────────────────────────────────────────────────────────┘
                                    │
                                    │ 1:N (CASCADE DELETE, ordered)
                                    ▼
    ┌─────────────────────────────────────────────────────────────────┐
    │                     product_components                           │
    ├─────────────────────────────────────────────────────────────────┤
    │ pk (INTEGER, PK, AUTO INCREMENT)                                │
    │ variable_pk (INTEGER, FK → product_variables.pk)                │
    │ position (INTEGER)                                              │
    │ component_id, name, unit_price, unit, enabled,                  │
    │ barcode, detail, href                                           │
    └─────────────────────────────────────────────────────────────────┘

Variable and component ids come from the supplier and repeat across
products, so child rows carry their own surrogate key and expose the
supplier id as ``id``.

=============================================================================
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import List

from sqlalchemy import (
    Column,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import relationship, Mapped
from sqlalchemy.types import TypeDecorator

from app.db.database import Base


def utcnow() -> datetime:
    """Timezone-aware UTC timestamp with microsecond precision."""
    return datetime.now(timezone.utc)


# =============================================================================
# COLUMN TYPES
# =============================================================================

class UTCDateTime(TypeDecorator):
    """
    Timestamp stored as UTC and always read back timezone-aware.

    SQLite keeps no offset, so values are written as naive UTC and tagged
    with UTC again on load.
    """

    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is not None and value.tzinfo is not None:
            value = value.astimezone(timezone.utc).replace(tzinfo=None)
        return value

    def process_result_value(self, value, dialect):
        if value is not None and value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value


class JSONNumber(TypeDecorator):
    """
    Floating point column that reads whole values back as ``int``.

    JSON has a single number type, so ``10`` is stored and served as
    ``10`` rather than ``10.0``.
    """

    impl = Float
    cache_ok = True

    def process_result_value(self, value, dialect):
        if value is not None and float(value).is_integer():
            return int(value)
        return value


# =============================================================================
# PRODUCT MODEL
# =============================================================================

class Product(Base):
    """
    Product model.

    Attributes:
        id: Supplier product id (unique key)
        name: Display name
        unit_price: Price per unit, stored as received
        unit: Unit of sale (e.g. "ea", "kg")
        enabled: Supplier enabled flag ("1"/"0")
        barcode, detail, href: Optional text, empty string when unknown
        salesgroup, group_id, type: Optional classification
        highlighted, manufactured, product_resale: Optional merchandising flags
        last_cost: Optional last purchase cost
        created_at: Insert timestamp (store-assigned)
        updated_at: Last modification timestamp (store-assigned)

    Relationships:
        variables: Ordered option groups of this product
    """

    __tablename__ = "products"

    # =========================================================================
    # COLUMNS
    # =========================================================================

    id: int = Column(
        Integer,
        primary_key=True,
        autoincrement=False,
        doc="Supplier product id"
    )

    name: str = Column(String(255), nullable=False, index=True)
    unit_price: float = Column(JSONNumber, nullable=False)
    unit: str = Column(String(50), nullable=False)
    enabled: str = Column(String(10), nullable=False)

    barcode: str = Column(String(100), nullable=False, default="")
    detail: str = Column(Text, nullable=False, default="")
    href: str = Column(String(500), nullable=False, default="")

    salesgroup: int = Column(Integer, nullable=True)
    group_id: int = Column(Integer, nullable=True)
    type: int = Column(Integer, nullable=True)

    highlighted: str = Column(String(10), nullable=True)
    manufactured: str = Column(String(10), nullable=True)
    product_resale: str = Column(String(10), nullable=True)

    last_cost: float = Column(JSONNumber, nullable=True)

    created_at: datetime = Column(
        UTCDateTime,
        default=utcnow,
        nullable=False,
        index=True,
        doc="Insert timestamp"
    )

    updated_at: datetime = Column(
        UTCDateTime,
        default=utcnow,
        onupdate=utcnow,
        nullable=False,
        doc="Last modification timestamp"
    )

    # =========================================================================
    # RELATIONSHIPS
    # =========================================================================

    variables: Mapped[List["ProductVariable"]] = relationship(
        "ProductVariable",
        back_populates="product",
        cascade="all, delete-orphan",
        order_by="ProductVariable.position",
        lazy="selectin",
        doc="Option groups in supplier order"
    )

    def __repr__(self) -> str:
        """Detailed string representation for debugging."""
        return (
            f"Product(id={self.id!r}, "
            f"name={self.name!r}, "
            f"variables={len(self.variables)})"
        )


# =============================================================================
# VARIABLE MODEL
# =============================================================================

class ProductVariable(Base):
    """
    Option group attached to a product (e.g. "Size").

    ``required`` and ``maximum`` keep the supplier's string flags.
    """

    __tablename__ = "product_variables"

    pk: int = Column(Integer, primary_key=True, autoincrement=True)

    product_id: int = Column(
        Integer,
        ForeignKey("products.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    position: int = Column(Integer, nullable=False, default=0)

    id: int = Column("variable_id", Integer, nullable=False)
    name: str = Column(String(255), nullable=False)
    required: str = Column(String(10), nullable=False)
    quantity: float = Column(JSONNumber, nullable=False)
    maximum: str = Column(String(10), nullable=False)
    quantity_maximum: float = Column(JSONNumber, nullable=False)

    product: Mapped["Product"] = relationship(
        "Product",
        back_populates="variables"
    )

    components: Mapped[List["ProductComponent"]] = relationship(
        "ProductComponent",
        back_populates="variable",
        cascade="all, delete-orphan",
        order_by="ProductComponent.position",
        lazy="selectin"
    )

    def __repr__(self) -> str:
        return f"ProductVariable(id={self.id!r}, name={self.name!r})"


# =============================================================================
# COMPONENT MODEL
# =============================================================================

class ProductComponent(Base):
    """Component offered by a variable."""

    __tablename__ = "product_components"

    pk: int = Column(Integer, primary_key=True, autoincrement=True)

    variable_pk: int = Column(
        Integer,
        ForeignKey("product_variables.pk", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    position: int = Column(Integer, nullable=False, default=0)

    id: int = Column("component_id", Integer, nullable=False)
    name: str = Column(String(255), nullable=False)
    unit_price: float = Column(JSONNumber, nullable=False)
    unit: str = Column(String(50), nullable=False)
    enabled: str = Column(String(10), nullable=False)

    barcode: str = Column(String(100), nullable=False, default="")
    detail: str = Column(Text, nullable=False, default="")
    href: str = Column(String(500), nullable=False, default="")

    variable: Mapped["ProductVariable"] = relationship(
        "ProductVariable",
        back_populates="components"
    )

    def __repr__(self) -> str:
        return f"ProductComponent(id={self.id!r}, name={self.name!r})"
