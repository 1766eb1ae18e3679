"""
==============================================================================
Loader Package - Supplier Data Ingestion
==============================================================================

One-shot reload of the product store from a nested supplier export.

Modules:
--------
- transform: pure normalization of one supplier product (policy tables)
- loader: ProductLoader state machine (read → parse → wipe → insert)
- cli: ``python -m app.loader`` entry point

==============================================================================
"""

from .transform import (
    FieldPolicy,
    FieldRule,
    TransformError,
    normalize,
)
from .loader import (
    LoadError,
    LoadResult,
    LoadStage,
    MalformedInputError,
    ProductLoader,
    RecordLoadError,
    SourceNotFoundError,
    SourceReadError,
)

__all__ = [
    # Transform
    "FieldPolicy",
    "FieldRule",
    "TransformError",
    "normalize",
    # Loader
    "LoadError",
    "LoadResult",
    "LoadStage",
    "MalformedInputError",
    "ProductLoader",
    "RecordLoadError",
    "SourceNotFoundError",
    "SourceReadError",
]
