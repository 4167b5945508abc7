"""Settings loaded from environment variables."""

import os
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Settings:
    """Runtime settings for one change detector job."""

    github_token: Optional[str] = None
    github_api_url: str = "https://api.github.com"
    account: str = "JoakimSoftware"
    storage_connection_string: Optional[str] = None
    container: str = "github"
    blob_name: str = "github_repos.json"
    request_timeout: int = 30
    swallow_errors: bool = True
    check_interval_seconds: int = 0
    log_level: str = "INFO"


def _env_bool(key: str, default: bool) -> bool:
    value = os.getenv(key)
    if value is None:
        return default
    return value.strip().lower() in ("true", "1", "yes")


def _env_int(key: str, default: int) -> int:
    value = os.getenv(key)
    if value is None or not value.strip():
        return default
    try:
        return int(value)
    except ValueError:
        raise ValueError(f"{key} must be an integer, got {value!r}")


def load_settings() -> Settings:
    """
    Build settings from the process environment.

    Credentials are not required here; a missing token or connection string
    only fails the operation that needs it.
    """
    log_level = os.getenv("LOG_LEVEL", "INFO").upper()
    if log_level not in ("DEBUG", "INFO", "WARNING", "ERROR"):
        raise ValueError(f"Invalid log level: {log_level}")

    return Settings(
        github_token=os.getenv("GITHUB_REST_API_READ_TOKEN") or None,
        github_api_url=os.getenv("GITHUB_API_URL", "https://api.github.com").rstrip("/"),
        account=os.getenv("GITHUB_ACCOUNT", "JoakimSoftware"),
        storage_connection_string=os.getenv("STORAGE_CONNECTION_STRING") or None,
        container=os.getenv("SNAPSHOT_CONTAINER", "github"),
        blob_name=os.getenv("SNAPSHOT_BLOB_NAME", "github_repos.json"),
        request_timeout=max(_env_int("REQUEST_TIMEOUT_SECONDS", 30), 1),
        swallow_errors=_env_bool("SWALLOW_ERRORS", True),
        check_interval_seconds=max(_env_int("CHECK_INTERVAL_SECONDS", 0), 0),
        log_level=log_level,
    )
