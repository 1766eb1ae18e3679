"""
==============================================================================
Product Service Module
==============================================================================

Record store operations for the product collection.

This module implements:
- ProductService: CRUD, pagination, search and bulk delete over products

Ordering:
--------
Every listing is sorted newest first (created_at DESC), ties broken by
id DESC so pages are stable.

Transactions:
------------
create/update/delete commit on their own. ``add_product`` only flushes so
the batch loader can insert a whole generation in one transaction.

==============================================================================
"""

from __future__ import annotations

import logging
from typing import List, Optional

from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Query, Session

from app.core import exceptions
from app.db.models import Product, ProductComponent, ProductVariable, utcnow
from app.schemas.product import (
    ComponentSchema,
    ProductCreate,
    ProductUpdate,
    VariableSchema,
)


# Module logger
logger = logging.getLogger(__name__)


class ProductService:
    """
    Product store service.

    Attributes:
        _db: Database session

    Example:
        >>> service = ProductService(db_session)
        >>> product = service.create_product(ProductCreate(
        ...     id=1, name="Pizza", unit_price=10, unit="ea", enabled="1"
        ... ))
        >>> service.search_products("pizz", offset=0, limit=10)
        [Product(id=1, name='Pizza', variables=0)]
    """

    def __init__(self, db: Session) -> None:
        """
        Args:
            db: SQLAlchemy database session
        """
        self._db = db

    # =========================================================================
    # BUILDERS
    # =========================================================================

    @staticmethod
    def _build_component(data: ComponentSchema, position: int) -> ProductComponent:
        return ProductComponent(
            position=position,
            id=data.id,
            name=data.name,
            unit_price=data.unit_price,
            unit=data.unit,
            enabled=data.enabled,
            barcode=data.barcode,
            detail=data.detail,
            href=data.href,
        )

    @classmethod
    def _build_variable(cls, data: VariableSchema, position: int) -> ProductVariable:
        return ProductVariable(
            position=position,
            id=data.id,
            name=data.name,
            required=data.required,
            quantity=data.quantity,
            maximum=data.maximum,
            quantity_maximum=data.quantity_maximum,
            components=[
                cls._build_component(component, index)
                for index, component in enumerate(data.components)
            ],
        )

    @classmethod
    def _build_variables(cls, variables: List[VariableSchema]) -> List[ProductVariable]:
        return [cls._build_variable(variable, index) for index, variable in enumerate(variables)]

    # =========================================================================
    # CREATE OPERATIONS
    # =========================================================================

    def add_product(self, data: ProductCreate) -> Product:
        """
        Stage a new product in the current transaction (flush, no commit).

        Raises:
            AppException: PRODUCT_EXISTS if the id is already taken
        """
        if self._db.get(Product, data.id) is not None:
            raise exceptions.product_exists(data.id)

        fields = data.model_dump(exclude={"variables"})
        product = Product(**fields, variables=self._build_variables(data.variables))

        self._db.add(product)
        try:
            self._db.flush()
        except IntegrityError:
            self._db.rollback()
            raise exceptions.product_exists(data.id)

        return product

    def create_product(self, data: ProductCreate) -> Product:
        """
        Insert a new product.

        Args:
            data: Validated product payload

        Returns:
            Stored Product

        Raises:
            AppException: PRODUCT_EXISTS if the id is already taken
        """
        product = self.add_product(data)
        self._db.commit()
        self._db.refresh(product)

        logger.info(f"✅ Product created: {product.id} ({product.name})")
        return product

    # =========================================================================
    # READ OPERATIONS
    # =========================================================================

    def _newest_first(self, query: Query) -> Query:
        return query.order_by(Product.created_at.desc(), Product.id.desc())

    @staticmethod
    def _search_filter(text: str):
        return or_(
            Product.name.icontains(text, autoescape=True),
            Product.detail.icontains(text, autoescape=True),
        )

    def get_by_id(self, product_id: int) -> Product:
        """
        Get product by id.

        Raises:
            AppException: PRODUCT_NOT_FOUND if absent
        """
        product = self._db.get(Product, product_id)

        if product is None:
            logger.debug(f"Product not found: {product_id}")
            raise exceptions.product_not_found(product_id)

        return product

    def list_products(self, offset: int = 0, limit: Optional[int] = None) -> List[Product]:
        """
        List products newest first.

        Args:
            offset: Rows to skip
            limit: Maximum rows, None for all
        """
        query = self._newest_first(self._db.query(Product)).offset(offset)
        if limit is not None:
            query = query.limit(limit)
        return query.all()

    def count_products(self) -> int:
        """Total number of products."""
        return self._db.query(Product).count()

    def search_products(self, text: str, offset: int = 0, limit: Optional[int] = None) -> List[Product]:
        """
        Case-insensitive substring search on name or detail.

        Args:
            text: Text to look for
            offset: Rows to skip
            limit: Maximum rows, None for all
        """
        query = self._db.query(Product).filter(self._search_filter(text))
        query = self._newest_first(query).offset(offset)
        if limit is not None:
            query = query.limit(limit)
        return query.all()

    def count_search(self, text: str) -> int:
        """Number of products matching ``text`` on name or detail."""
        return self._db.query(Product).filter(self._search_filter(text)).count()

    def list_short_data(self):
        """Rows of (id, name, detail, unit_price), newest first."""
        query = self._db.query(
            Product.id,
            Product.name,
            Product.detail,
            Product.unit_price,
        )
        return self._newest_first(query).all()

    # =========================================================================
    # UPDATE OPERATIONS
    # =========================================================================

    def update_product(self, product_id: int, data: ProductUpdate) -> Product:
        """
        Apply a partial update.

        Only fields present in ``data`` change. ``variables``, when sent,
        replaces the existing variable list.

        Raises:
            AppException: PRODUCT_NOT_FOUND if absent
        """
        product = self.get_by_id(product_id)

        changes = data.model_dump(exclude_unset=True, exclude={"variables"})
        for field_name, value in changes.items():
            setattr(product, field_name, value)

        if "variables" in data.model_fields_set:
            product.variables = self._build_variables(data.variables)

        product.updated_at = utcnow()

        self._db.commit()
        self._db.refresh(product)

        logger.info(f"✅ Product updated: {product.id} ({', '.join(sorted(data.model_fields_set)) or 'no fields'})")
        return product

    # =========================================================================
    # DELETE OPERATIONS
    # =========================================================================

    def delete_product(self, product_id: int) -> None:
        """
        Delete a product with its variables and components.

        Raises:
            AppException: PRODUCT_NOT_FOUND if absent
        """
        product = self.get_by_id(product_id)

        self._db.delete(product)
        self._db.commit()

        logger.info(f"🗑️ Product deleted: {product_id}")

    def delete_all(self, commit: bool = True) -> int:
        """
        Delete every product, variable and component.

        Calling it on an empty store is not an error.

        Args:
            commit: Commit immediately (default) or leave it to the caller

        Returns:
            Number of products deleted
        """
        self._db.query(ProductComponent).delete(synchronize_session=False)
        self._db.query(ProductVariable).delete(synchronize_session=False)
        deleted = self._db.query(Product).delete(synchronize_session=False)

        if commit:
            self._db.commit()
        self._db.expunge_all()

        logger.warning(f"🗑️ Deleted all products ({deleted})")
        return deleted
