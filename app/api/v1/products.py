"""
==============================================================================
Product Endpoints
==============================================================================

CRUD, pagination, search and bulk delete over the product collection.

Static paths (/search, /short-data/all, /delete/all) are registered before
/{product_id} so they are not captured as ids.

==============================================================================
"""

from contextlib import contextmanager
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core import exceptions
from app.core.dependencies import Pagination, get_db, get_pagination, get_product_id
from app.db.models import Product
from app.schemas.product import ProductCreate, ProductRead, ProductShort, ProductUpdate
from app.services.product_service import ProductService


router = APIRouter(prefix="/products", tags=["Products"])


def serialize(product: Product) -> Dict[str, Any]:
    """Stored product → camelCase JSON dict, unset optionals omitted."""
    return ProductRead.model_validate(product).model_dump(
        by_alias=True,
        exclude_none=True,
        mode="json",
    )


@contextmanager
def store_errors(message: str):
    """Turn store failures into a 500 AppException carrying ``message``."""
    try:
        yield
    except SQLAlchemyError as e:
        raise exceptions.store_error(message, e)


class ProductController:
    """Controller for product operations."""

    def __init__(self, db: Session):
        self._service = ProductService(db)

    def list_products(self, pagination: Pagination, no_paginate: bool) -> dict:
        """List products newest first, one page or all."""
        with store_errors("Failed to fetch products"):
            if no_paginate:
                products = self._service.list_products()
                return {
                    "success": True,
                    "products": [serialize(p) for p in products],
                }

            products = self._service.list_products(pagination.offset, pagination.limit)
            total = self._service.count_products()

        return {
            "success": True,
            "products": [serialize(p) for p in products],
            "pagination": pagination.describe(total),
        }

    def search(self, query: Optional[str], pagination: Pagination) -> dict:
        """Case-insensitive search on name or detail."""
        if not query:
            raise exceptions.search_query_required()

        with store_errors("Failed to search products"):
            products = self._service.search_products(query, pagination.offset, pagination.limit)
            total = self._service.count_search(query)

        return {
            "success": True,
            "data": [serialize(p) for p in products],
            "pagination": pagination.describe(total),
        }

    def short_data(self) -> dict:
        """id, name, detail and unitPrice of every product."""
        with store_errors("Failed to fetch product names and IDs"):
            rows = self._service.list_short_data()

        return {
            "success": True,
            "products": [
                ProductShort.model_validate(row).model_dump(by_alias=True)
                for row in rows
            ],
        }

    def get(self, product_id: int) -> dict:
        """Get product by id."""
        with store_errors("Failed to fetch product"):
            product = self._service.get_by_id(product_id)

        return {"success": True, "data": serialize(product)}

    def create(self, data: ProductCreate) -> dict:
        """Create a product; the id must be new."""
        with store_errors("Failed to create product"):
            product = self._service.create_product(data)

        return {
            "success": True,
            "data": serialize(product),
            "message": "Product created successfully",
        }

    def update(self, product_id: int, data: ProductUpdate) -> dict:
        """Partially update a product."""
        with store_errors("Failed to update product"):
            product = self._service.update_product(product_id, data)

        return {
            "success": True,
            "data": serialize(product),
            "message": "Product updated successfully",
        }

    def delete(self, product_id: int) -> dict:
        """Delete one product."""
        with store_errors("Failed to delete product"):
            self._service.delete_product(product_id)

        return {"success": True, "message": "Product deleted successfully"}

    def delete_all(self) -> dict:
        """Delete every product."""
        with store_errors("Failed to delete all products"):
            self._service.delete_all()

        return {"success": True, "message": "All products deleted successfully"}


@router.get("")
async def list_products(
    no_paginate: Optional[str] = Query(None, description="Any non-empty value returns every product"),
    pagination: Pagination = Depends(get_pagination),
    db: Session = Depends(get_db)
):
    """List products, paginated unless ``no_paginate`` is set."""
    controller = ProductController(db)
    return controller.list_products(pagination, bool(no_paginate))


@router.get("/search")
async def search_products(
    q: Optional[str] = Query(None, description="Text to match in name or detail"),
    pagination: Pagination = Depends(get_pagination),
    db: Session = Depends(get_db)
):
    """Search products by name or detail."""
    controller = ProductController(db)
    return controller.search(q, pagination)


@router.get("/short-data/all")
async def get_products_short_data(db: Session = Depends(get_db)):
    """Get id, name, detail and unit price of all products."""
    controller = ProductController(db)
    return controller.short_data()


@router.delete("/delete/all")
async def delete_all_products(db: Session = Depends(get_db)):
    """Delete every product."""
    controller = ProductController(db)
    return controller.delete_all()


@router.post("", status_code=201)
async def create_product(data: ProductCreate, db: Session = Depends(get_db)):
    """Create a new product."""
    controller = ProductController(db)
    return controller.create(data)


@router.get("/{product_id}")
async def get_product(product_id: int = Depends(get_product_id), db: Session = Depends(get_db)):
    """Get product by id."""
    controller = ProductController(db)
    return controller.get(product_id)


@router.put("/{product_id}")
async def update_product(
    data: ProductUpdate,
    product_id: int = Depends(get_product_id),
    db: Session = Depends(get_db)
):
    """Partially update a product."""
    controller = ProductController(db)
    return controller.update(product_id, data)


@router.delete("/{product_id}")
async def delete_product(product_id: int = Depends(get_product_id), db: Session = Depends(get_db)):
    """Delete a product by id."""
    controller = ProductController(db)
    return controller.delete(product_id)
