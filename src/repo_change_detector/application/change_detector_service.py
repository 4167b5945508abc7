"""Application service that detects changes in an account's repository list."""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional

from repo_change_detector.config import Settings
from repo_change_detector.domain.repository import RepositoryRecord
from repo_change_detector.domain.snapshot import EMPTY_SNAPSHOT, parse_snapshot, snapshots_differ
from repo_change_detector.infrastructure.blob_store import PostgresBlobStore
from repo_change_detector.infrastructure.github_client import GitHubRestClient


@dataclass(frozen=True)
class ChangeDetectionResult:
    """Outcome of one change detection run."""

    changed: bool = False
    persisted: bool = False
    current_count: int = 0
    previous_count: int = 0
    error: Optional[Exception] = None

    @property
    def succeeded(self) -> bool:
        return self.error is None


class ChangeDetectorService:
    """
    Compares the live repository listing with the stored snapshot.

    Overlapping runs against the same blob are not guarded: the last write wins.
    """

    def __init__(
        self,
        github_client: GitHubRestClient,
        blob_store: PostgresBlobStore,
        settings: Settings,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize change detector service.

        Args:
            github_client: GitHub REST API client
            blob_store: Store holding the previous snapshot
            settings: Account, container and blob name to use
            logger: Destination for run logs. Defaults to this module's logger.
        """
        self.github_client = github_client
        self.blob_store = blob_store
        self.settings = settings
        self.logger = logger or logging.getLogger(__name__)

    def fetch_current(self) -> str:
        return self.github_client.fetch_user_repos(self.settings.account)

    def fetch_previous(self) -> str:
        """Read the stored snapshot, or the empty snapshot if none was written yet."""
        text = self.blob_store.read_text(self.settings.container, self.settings.blob_name)
        if text is None:
            self.logger.info(
                f"No stored snapshot at {self.settings.container}/{self.settings.blob_name}, "
                f"treating previous as empty"
            )
            return EMPTY_SNAPSHOT
        return text

    def parse(self, text: str) -> List[RepositoryRecord]:
        return parse_snapshot(text)

    def compare(self, current_text: str, previous_text: str) -> bool:
        """Return True if the raw payloads differ."""
        return snapshots_differ(current_text, previous_text)

    def persist(self, text: str):
        self.blob_store.write_text(self.settings.container, self.settings.blob_name, text)

    def _log_records(self, label: str, records: List[RepositoryRecord]):
        for record in records:
            self.logger.info(
                f"{label}: {record.id} {record.name} {record.full_name} {record.description}"
            )

    def detect_changes(self) -> ChangeDetectionResult:
        """
        Run one fetch, compare and persist pass.

        Both payloads are parsed before comparing, so a malformed payload
        aborts the run even though the comparison uses the raw text.

        Returns:
            Result describing whether a change was found and written

        Raises:
            ChangeDetectorError: From any step; nothing is handled here
        """
        current_text = self.fetch_current()
        previous_text = self.fetch_previous()

        current = self.parse(current_text)
        previous = self.parse(previous_text)

        if not self.compare(current_text, previous_text):
            self.logger.info("No differences found")
            return ChangeDetectionResult(
                changed=False,
                persisted=False,
                current_count=len(current),
                previous_count=len(previous)
            )

        self._log_records("Current", current)
        self._log_records("Previous", previous)
        self.logger.info(f"Current count: {len(current)}, previous count: {len(previous)}")
        self.logger.info("Differences found")

        self.persist(current_text)
        self.logger.info(
            f"Wrote new snapshot to {self.settings.container}/{self.settings.blob_name}"
        )

        return ChangeDetectionResult(
            changed=True,
            persisted=True,
            current_count=len(current),
            previous_count=len(previous)
        )

    def run(self, raise_errors: bool = False) -> ChangeDetectionResult:
        """
        Entry point for one trigger tick.

        Any exception is caught once here and logged. By default it is then
        returned inside the result so the trigger sees a normal completion.

        Args:
            raise_errors: Re-raise the caught exception instead of returning it

        Returns:
            Result of the run, with ``error`` set if it failed
        """
        self.logger.info(f"Change detector triggered at: {datetime.now().isoformat()}")
        try:
            return self.detect_changes()
        except Exception as e:
            self.logger.error(f"Change detection failed: {e}")
            if raise_errors:
                raise
            return ChangeDetectionResult(error=e)
