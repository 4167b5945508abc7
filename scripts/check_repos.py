#!/usr/bin/env python3
"""Script to check an account's GitHub repositories for changes."""

import logging
import sys
import os
import time

# Add src to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from repo_change_detector.config import load_settings
from repo_change_detector.infrastructure.github_client import GitHubRestClient
from repo_change_detector.infrastructure.blob_store import PostgresBlobStore
from repo_change_detector.application.change_detector_service import ChangeDetectorService

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

logger = logging.getLogger(__name__)


def main():
    """Run the change detector once, or on a fixed interval."""
    try:
        settings = load_settings()
    except ValueError as e:
        logging.basicConfig(level=logging.INFO, format=LOG_FORMAT)
        logger.error(f"Invalid configuration: {e}")
        return 1

    logging.basicConfig(level=getattr(logging, settings.log_level), format=LOG_FORMAT)

    github_client = GitHubRestClient(
        token=settings.github_token,
        base_url=settings.github_api_url,
        timeout=settings.request_timeout
    )
    blob_store = PostgresBlobStore(settings.storage_connection_string)
    service = ChangeDetectorService(
        github_client,
        blob_store,
        settings,
        logger=logging.getLogger("repo_change_detector")
    )

    try:
        if settings.check_interval_seconds <= 0:
            result = service.run()
            if result.succeeded or settings.swallow_errors:
                return 0
            return 1

        logger.info(f"Checking every {settings.check_interval_seconds} seconds")
        # Runs are serial, so ticks never overlap within this process
        while True:
            result = service.run()
            if not result.succeeded and not settings.swallow_errors:
                return 1
            time.sleep(settings.check_interval_seconds)
    except KeyboardInterrupt:
        logger.info("Stopped")
        return 0
    finally:
        blob_store.close()


if __name__ == "__main__":
    sys.exit(main())
