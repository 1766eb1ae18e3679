"""
==============================================================================
Batch Loader Module
==============================================================================

Full wipe-and-reload of the product store from a supplier JSON export.

State Machine:
-------------

    ┌──────┐   ┌─────────┐   ┌─────────┐   ┌────────┐   ┌───────────┐   ┌──────┐
    │ IDLE │──▶│ READING │──▶│ PARSING │──▶│ WIPING │──▶│ INSERTING │──▶│ DONE │
    └──────┘   └────┬────┘   └────┬────┘   └───┬────┘   └─────┬─────┘   └──────┘
                    │             │            │              │
                    └─────────────┴─────┬──────┴──────────────┘
                                        ▼
                                   ┌────────┐
                                   │ FAILED │
                                   └────────┘

Guarantees:
----------
- Nothing is written unless the whole file reads and parses.
- The wipe is committed before the first insert.
- All inserts share one transaction: the first failing record rolls the
  batch back, leaving the store empty rather than half-loaded.

Concurrency:
-----------
No locking. Do not run a reload concurrently with another reload or with
live writes to the products table.

==============================================================================
"""

from __future__ import annotations

import enum
import json
import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any, List, Optional, Union

from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.exceptions import AppException, describe_validation_errors
from app.loader.transform import TransformError, normalize
from app.schemas.product import ProductCreate
from app.services.product_service import ProductService


# Module logger
logger = logging.getLogger(__name__)


class LoadStage(str, enum.Enum):
    """Batch loader states."""

    IDLE = "idle"
    READING = "reading"
    PARSING = "parsing"
    WIPING = "wiping"
    INSERTING = "inserting"
    DONE = "done"
    FAILED = "failed"

    def __str__(self) -> str:
        return self.value


# =============================================================================
# ERRORS
# =============================================================================

class LoadError(Exception):
    """
    A reload failed and was aborted.

    Attributes:
        stage: Stage in which the failure happened
        cause: Underlying exception, if any
    """

    def __init__(self, stage: LoadStage, message: str, cause: Optional[BaseException] = None) -> None:
        self.stage = stage
        self.cause = cause
        super().__init__(f"[{stage}] {message}")


class SourceNotFoundError(LoadError):
    """The export file does not exist."""


class SourceReadError(LoadError):
    """The export file exists but cannot be read."""


class MalformedInputError(LoadError):
    """The export is not valid JSON or has no ``products`` array."""


class RecordLoadError(LoadError):
    """
    One product could not be transformed, validated or inserted.

    Attributes:
        index: Zero-based position of the record in ``products``
        product_id: The record's ``id`` when it has one
    """

    def __init__(
        self,
        index: int,
        product_id: Any,
        message: str,
        cause: Optional[BaseException] = None
    ) -> None:
        self.index = index
        self.product_id = product_id
        super().__init__(
            LoadStage.INSERTING,
            f"Product #{index} (id={product_id!r}): {message}",
            cause,
        )


@dataclass(frozen=True)
class LoadResult:
    """Outcome of a successful reload."""

    count: int
    source: Path
    duration_seconds: float


# =============================================================================
# LOADER
# =============================================================================

class ProductLoader:
    """
    Replaces the product collection with the contents of an export file.

    Attributes:
        stage: Current LoadStage

    Example:
        >>> with DatabaseManager().session_scope() as session:
        ...     result = ProductLoader(session).reload("data/sample_products.json")
        >>> result.count
        42
    """

    def __init__(self, db: Session) -> None:
        """
        Args:
            db: Session used for the wipe and the inserts
        """
        self._db = db
        self._service = ProductService(db)
        self._stage = LoadStage.IDLE

    @property
    def stage(self) -> LoadStage:
        """Current state of the loader."""
        return self._stage

    # =========================================================================
    # STAGES
    # =========================================================================

    def _read(self, source: Path) -> str:
        self._stage = LoadStage.READING
        logger.info(f"📄 Reading products from: {source}")

        try:
            return source.read_text(encoding="utf-8")
        except FileNotFoundError as e:
            raise SourceNotFoundError(self._stage, f"Source file not found: {source}", e)
        except UnicodeDecodeError as e:
            raise MalformedInputError(self._stage, f"Source file is not UTF-8: {e}", e)
        except OSError as e:
            raise SourceReadError(self._stage, f"Cannot read source file {source}: {e}", e)

    def _parse(self, content: str) -> List[Any]:
        self._stage = LoadStage.PARSING

        try:
            data = json.loads(content)
        except json.JSONDecodeError as e:
            raise MalformedInputError(self._stage, f"Invalid JSON: {e}", e)

        if not isinstance(data, dict) or "products" not in data:
            raise MalformedInputError(self._stage, "Missing 'products' field")

        products = data["products"]
        if not isinstance(products, list):
            raise MalformedInputError(
                self._stage,
                f"'products' must be an array, got {type(products).__name__}"
            )

        logger.info(f"Found {len(products)} products to process")
        return products

    def _wipe(self) -> None:
        self._stage = LoadStage.WIPING

        try:
            deleted = self._service.delete_all()
        except SQLAlchemyError as e:
            self._db.rollback()
            raise LoadError(self._stage, f"Failed to clear existing products: {e}", e)

        logger.info(f"Cleared existing products ({deleted})")

    def _insert_one(self, index: int, raw: Any) -> None:
        product_id = raw.get("id") if isinstance(raw, dict) else None

        try:
            record = normalize(raw)
            data = ProductCreate.model_validate(record)
            product = self._service.add_product(data)
        except TransformError as e:
            raise RecordLoadError(index, product_id, str(e), e)
        except ValidationError as e:
            raise RecordLoadError(index, product_id, describe_validation_errors(e.errors()), e)
        except AppException as e:
            raise RecordLoadError(index, product_id, e.message, e)
        except SQLAlchemyError as e:
            raise RecordLoadError(index, product_id, f"Store error: {e}", e)

        logger.debug(f"Saved product: {product.name}")

    def _insert_all(self, products: List[Any]) -> int:
        self._stage = LoadStage.INSERTING

        for index, raw in enumerate(products):
            self._insert_one(index, raw)

        try:
            self._db.commit()
        except SQLAlchemyError as e:
            raise LoadError(self._stage, f"Failed to commit products: {e}", e)

        return len(products)

    # =========================================================================
    # PUBLIC API
    # =========================================================================

    def reload(self, source_path: Union[str, Path]) -> LoadResult:
        """
        Replace every stored product with the products in ``source_path``.

        Args:
            source_path: Path to a ``{"products": [...]}`` JSON export

        Returns:
            LoadResult with the number of products inserted

        Raises:
            SourceNotFoundError: File missing
            SourceReadError: File unreadable
            MalformedInputError: Not JSON / no ``products`` array
            RecordLoadError: A product failed; the batch is rolled back
            LoadError: Wipe or commit failed
        """
        source = Path(source_path)
        started = time.monotonic()

        try:
            content = self._read(source)
            products = self._parse(content)
            self._wipe()
            count = self._insert_all(products)
        except LoadError as e:
            failed_stage = self._stage
            self._stage = LoadStage.FAILED
            if failed_stage is LoadStage.INSERTING:
                self._db.rollback()
            logger.error(f"❌ Reload failed: {e}")
            raise

        self._stage = LoadStage.DONE
        result = LoadResult(
            count=count,
            source=source,
            duration_seconds=time.monotonic() - started,
        )
        logger.info(f"✅ Loaded {result.count} products in {result.duration_seconds:.2f}s")
        return result
