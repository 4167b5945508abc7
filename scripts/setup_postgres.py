#!/usr/bin/env python3
"""Script to initialize the PostgreSQL blob store schema."""

import logging
import sys
import os

# Add src to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from repo_change_detector.infrastructure.blob_store import PostgresBlobStore, StoreWriteError

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

logger = logging.getLogger(__name__)


def main():
    """Initialize blob store schema."""
    blob_store = PostgresBlobStore()
    try:
        blob_store.initialize_schema()
        logger.info("Blob store schema setup completed successfully")
        return 0
    except StoreWriteError as e:
        logger.error(f"Failed to setup blob store schema: {e}")
        return 1
    finally:
        blob_store.close()


if __name__ == "__main__":
    sys.exit(main())
