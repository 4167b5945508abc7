"""GitHub REST API client for listing an account's repositories."""

import logging
import os
from typing import Optional

import requests

from repo_change_detector.domain.errors import ChangeDetectorError

logger = logging.getLogger(__name__)


class RemoteFetchError(ChangeDetectorError):
    """Raised when the repository listing cannot be fetched."""
    pass


class GitHubRestClient:
    """Client for the GitHub REST API. Makes a single attempt per request."""

    DEFAULT_BASE_URL = "https://api.github.com"
    USER_AGENT = "repo-change-detector"

    def __init__(
        self,
        token: Optional[str] = None,
        base_url: str = DEFAULT_BASE_URL,
        timeout: int = 30,
        session: Optional[requests.Session] = None
    ):
        """
        Initialize GitHub REST client.

        Args:
            token: GitHub token with read access. If None, uses GITHUB_REST_API_READ_TOKEN env var.
            base_url: API root, without trailing slash
            timeout: Request timeout in seconds
            session: Optional requests session to reuse connections
        """
        if token is None:
            token = os.getenv("GITHUB_REST_API_READ_TOKEN")

        self.token = token
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.headers = {
            "User-Agent": self.USER_AGENT,
            "Accept": "application/json",
        }

    def fetch_user_repos(self, account: str) -> str:
        """
        Fetch the repository listing for an account.

        The body is returned verbatim so callers can compare raw payloads.

        Args:
            account: GitHub user or organisation login

        Returns:
            Response body text

        Raises:
            RemoteFetchError: If no token is configured, the request fails, or
                the status is not 2xx
        """
        if not self.token:
            raise RemoteFetchError("GITHUB_REST_API_READ_TOKEN is not set")

        url = f"{self.base_url}/users/{account}/repos"
        headers = dict(self.headers)
        headers["Authorization"] = f"Bearer {self.token}"

        try:
            response = self.session.get(url, headers=headers, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            raise RemoteFetchError(f"Request to {url} failed: {e}") from e

        if not 200 <= response.status_code < 300:
            raise RemoteFetchError(
                f"GET {url} returned {response.status_code}: {response.text[:200]}"
            )

        logger.debug(f"Fetched {len(response.text)} characters from {url}")
        return response.text
