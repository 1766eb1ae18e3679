"""
==============================================================================
Common Schemas Module
==============================================================================

Shared base model and response pieces used across the API.

==============================================================================
"""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """
    Base model exposing snake_case attributes under camelCase JSON names.

    Accepts either spelling on input, reads ORM objects directly and casts
    numbers sent for string fields (``"enabled": 1`` becomes ``"1"``).
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
        coerce_numbers_to_str=True,
    )


class PaginationInfo(CamelModel):
    """Pagination block returned with list and search results."""
    current_page: int = Field(ge=1)
    total_pages: int = Field(ge=0)
    total_items: int = Field(ge=0)
    items_per_page: int = Field(ge=1)
