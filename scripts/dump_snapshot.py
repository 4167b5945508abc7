#!/usr/bin/env python3
"""Script to dump the stored repository snapshot to CSV and JSON."""

import logging
import sys
import os
import csv
import json
from dataclasses import asdict
from datetime import datetime

# Add src to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from repo_change_detector.config import load_settings
from repo_change_detector.domain.snapshot import EMPTY_SNAPSHOT, parse_snapshot
from repo_change_detector.infrastructure.blob_store import PostgresBlobStore

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

logger = logging.getLogger(__name__)

FIELDNAMES = ["id", "name", "full_name", "description"]


def dump_to_csv(records, output_file: str):
    """Dump records to CSV."""
    with open(output_file, 'w', newline='', encoding='utf-8') as f:
        writer = csv.DictWriter(f, fieldnames=FIELDNAMES)
        writer.writeheader()
        writer.writerows(asdict(record) for record in records)

    logger.info(f"Dumped {len(records)} repositories to {output_file}")


def dump_to_json(records, output_file: str):
    """Dump records to JSON."""
    with open(output_file, 'w', encoding='utf-8') as f:
        json.dump([asdict(record) for record in records], f, indent=2, ensure_ascii=False)

    logger.info(f"Dumped {len(records)} repositories to {output_file}")


def main():
    """Dump the stored snapshot to CSV and JSON."""
    blob_store = None
    try:
        settings = load_settings()
        blob_store = PostgresBlobStore(settings.storage_connection_string)

        text = blob_store.read_text(settings.container, settings.blob_name)
        records = parse_snapshot(text if text is not None else EMPTY_SNAPSHOT)
        if not records:
            logger.warning("No data to dump")
            return 0

        output_dir = os.getenv("OUTPUT_DIR", "artifacts")
        os.makedirs(output_dir, exist_ok=True)

        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        csv_file = os.path.join(output_dir, f"repositories_{timestamp}.csv")
        json_file = os.path.join(output_dir, f"repositories_{timestamp}.json")

        dump_to_csv(records, csv_file)
        dump_to_json(records, json_file)

        logger.info(f"Snapshot dump completed. Files: {csv_file}, {json_file}")
        return 0
    except Exception as e:
        logger.error(f"Snapshot dump failed: {e}", exc_info=True)
        return 1
    finally:
        if blob_store:
            blob_store.close()


if __name__ == "__main__":
    sys.exit(main())
