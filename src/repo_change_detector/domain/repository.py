"""Domain entities for GitHub repositories."""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class RepositoryRecord:
    """Immutable repository record as listed by the GitHub REST API."""

    id: int
    name: str
    full_name: str
    description: Optional[str] = None
