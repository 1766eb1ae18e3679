"""
==============================================================================
Product Schemas Module
==============================================================================

Request and response schemas for products, variables and components.

These schemas are the explicit validation step in front of the store: the
HTTP create/update routes and the batch loader both validate through them
before anything is written.

Field rules:
-----------
- name, unit, enabled, required, maximum: required, non-empty
- barcode, detail, href: optional, null/absent becomes ""
- salesgroup, groupId, type, highlighted, manufactured, productResale,
  lastCost: optional, left unset when absent

==============================================================================
"""

from __future__ import annotations

from datetime import datetime
from typing import ClassVar, List, Optional, Tuple, Union

from pydantic import Field, field_validator, model_validator

from .common import CamelModel


Number = Union[int, float]

TEXT_FIELDS = ("barcode", "detail", "href")


# =============================================================================
# COMPONENT / VARIABLE
# =============================================================================

class ComponentSchema(CamelModel):
    """Component offered by a variable."""

    id: int
    name: str = Field(..., min_length=1)
    unit_price: Number
    unit: str = Field(..., min_length=1)
    enabled: str = Field(..., min_length=1)
    barcode: str = ""
    detail: str = ""
    href: str = ""

    @field_validator(*TEXT_FIELDS, mode="before")
    @classmethod
    def default_text(cls, value):
        return "" if value is None else value


class VariableSchema(CamelModel):
    """Option group with its ordered components."""

    id: int
    name: str = Field(..., min_length=1)
    required: str = Field(..., min_length=1)
    quantity: Number
    maximum: str = Field(..., min_length=1)
    quantity_maximum: Number
    components: List[ComponentSchema] = Field(default_factory=list)


# =============================================================================
# PRODUCT REQUESTS
# =============================================================================

class ProductBase(CamelModel):
    """Fields shared by every full product representation."""

    id: int
    name: str = Field(..., min_length=1)
    unit_price: Number
    unit: str = Field(..., min_length=1)
    enabled: str = Field(..., min_length=1)
    barcode: str = ""
    detail: str = ""
    href: str = ""
    salesgroup: Optional[int] = None
    group_id: Optional[int] = None
    type: Optional[int] = None
    highlighted: Optional[str] = None
    manufactured: Optional[str] = None
    product_resale: Optional[str] = None
    last_cost: Optional[Number] = None
    variables: List[VariableSchema] = Field(default_factory=list)

    @field_validator(*TEXT_FIELDS, mode="before")
    @classmethod
    def default_text(cls, value):
        return "" if value is None else value


class ProductCreate(ProductBase):
    """Payload for POST /api/products and for each loader record."""


class ProductUpdate(CamelModel):
    """
    Partial update payload for PUT /api/products/{id}.

    Only fields present in the request are applied. ``id`` and the
    timestamps are not updatable and are ignored if sent. Sending
    ``variables`` replaces the whole variable list.
    """

    NON_NULLABLE: ClassVar[Tuple[str, ...]] = ("name", "unit_price", "unit", "enabled", "variables")

    name: Optional[str] = Field(None, min_length=1)
    unit_price: Optional[Number] = None
    unit: Optional[str] = Field(None, min_length=1)
    enabled: Optional[str] = Field(None, min_length=1)
    barcode: Optional[str] = None
    detail: Optional[str] = None
    href: Optional[str] = None
    salesgroup: Optional[int] = None
    group_id: Optional[int] = None
    type: Optional[int] = None
    highlighted: Optional[str] = None
    manufactured: Optional[str] = None
    product_resale: Optional[str] = None
    last_cost: Optional[Number] = None
    variables: Optional[List[VariableSchema]] = None

    @field_validator(*TEXT_FIELDS, mode="before")
    @classmethod
    def default_text(cls, value):
        return "" if value is None else value

    @model_validator(mode="after")
    def reject_null_required(self) -> "ProductUpdate":
        """Required product fields may be changed but not cleared."""
        for field_name in self.NON_NULLABLE:
            if field_name in self.model_fields_set and getattr(self, field_name) is None:
                raise ValueError(f"{field_name} cannot be null")
        return self


# =============================================================================
# PRODUCT RESPONSES
# =============================================================================

class ProductRead(ProductBase):
    """Stored product as returned by the API."""

    created_at: datetime
    updated_at: datetime


class ProductShort(CamelModel):
    """Projection used by GET /api/products/short-data/all."""

    id: int
    name: str
    detail: str
    unit_price: Number
