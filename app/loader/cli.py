"""
==============================================================================
Batch Loader Command Line
==============================================================================

Operational entry point for a full product reload.

Usage:
------
    python -m app.loader                         # uses PRODUCTS_FILE
    python -m app.loader data/export.json
    python -m app.loader data/export.json --delay 5

    # or, once installed
    products-load data/export.json

Exit codes:
----------
    0  reload completed
    1  store unavailable or reload failed

The optional start-up delay (LOADER_STARTUP_DELAY / --delay) gives a store
started alongside the loader (e.g. in the same compose file) time to come
up before the first connection attempt.

==============================================================================
"""

from __future__ import annotations

import argparse
import logging
import time
from pathlib import Path
from typing import List, Optional

from app.config import get_settings
from app.core.exceptions import StoreUnavailable
from app.db.database import DatabaseManager
from app.db.init_db import DatabaseInitializer
from app.loader.loader import LoadError, ProductLoader


logger = logging.getLogger(__name__)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    settings = get_settings()

    parser = argparse.ArgumentParser(
        prog="products-load",
        description="Wipe the product store and reload it from a supplier JSON export.",
    )
    parser.add_argument(
        "source",
        nargs="?",
        type=Path,
        default=settings.products_path,
        help="Path to the products export (default: %(default)s)",
    )
    parser.add_argument(
        "--delay",
        type=float,
        default=settings.loader_startup_delay,
        help="Seconds to wait before connecting to the store (default: %(default)s)",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Log every saved product",
    )
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    """Run a reload and return the process exit code."""
    args = parse_args(argv)
    settings = get_settings()

    logging.basicConfig(
        level=logging.DEBUG if (args.verbose or settings.debug) else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s"
    )

    logger.info("Starting data processing...")

    if args.delay > 0:
        logger.info(f"Waiting {args.delay:g}s for the store to be ready")
        time.sleep(args.delay)

    db_manager = DatabaseManager()

    try:
        DatabaseInitializer(db_manager).initialize()
    except StoreUnavailable as e:
        logger.error(f"❌ {e}")
        return 1

    try:
        with db_manager.session_scope() as session:
            result = ProductLoader(session).reload(args.source)
    except LoadError as e:
        logger.error(f"❌ Data processing failed: {e}")
        return 1
    finally:
        db_manager.dispose()

    logger.info(f"Data processing finished: {result.count} products from {result.source}")
    return 0
