"""Shared fixtures for change detector tests."""

from __future__ import annotations

import logging
import typing as typ

import pytest

from repo_change_detector.application.change_detector_service import ChangeDetectorService
from repo_change_detector.config import Settings
from repo_change_detector.infrastructure.github_client import RemoteFetchError

SINGLE_REPO = '[{"id":1,"name":"a","full_name":"u/a","description":"x"}]'
TWO_REPOS = (
    '[{"id":1,"name":"a","full_name":"u/a","description":"x"},'
    '{"id":2,"name":"b","full_name":"u/b","description":"y"}]'
)


class FakeGitHubClient:
    """Returns a fixed payload, or raises a fixed error."""

    def __init__(self, payload: str = SINGLE_REPO, error: Exception | None = None) -> None:
        self.payload = payload
        self.error = error
        self.accounts: list[str] = []

    def fetch_user_repos(self, account: str) -> str:
        self.accounts.append(account)
        if self.error is not None:
            raise self.error
        return self.payload


class FakeBlobStore:
    """In-memory stand-in for PostgresBlobStore."""

    def __init__(self, blobs: dict[tuple[str, str], str] | None = None) -> None:
        self.blobs = dict(blobs or {})
        self.writes: list[tuple[str, str, str]] = []
        self.closed = False

    def read_text(self, container: str, blob_name: str) -> str | None:
        return self.blobs.get((container, blob_name))

    def write_text(self, container: str, blob_name: str, text: str) -> None:
        self.writes.append((container, blob_name, text))
        self.blobs[(container, blob_name)] = text

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def settings() -> Settings:
    return Settings(github_token="token", account="octo", storage_connection_string="dbname=test")


@pytest.fixture
def blob_store() -> FakeBlobStore:
    return FakeBlobStore()


@pytest.fixture
def make_service(
    settings: Settings, blob_store: FakeBlobStore
) -> typ.Callable[..., ChangeDetectorService]:
    """Build a service around the fake store with a chosen remote payload."""

    def _make(payload: str = SINGLE_REPO, error: Exception | None = None) -> ChangeDetectorService:
        return ChangeDetectorService(
            FakeGitHubClient(payload, error),
            blob_store,
            settings,
            logger=logging.getLogger("tests.change_detector"),
        )

    return _make


@pytest.fixture
def remote_failure() -> RemoteFetchError:
    return RemoteFetchError("GET https://api.github.com/users/octo/repos returned 500: boom")
