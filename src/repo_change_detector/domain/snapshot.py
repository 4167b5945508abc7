"""Parsing and comparison of repository snapshots."""

import json
from typing import Any, List

from repo_change_detector.domain.errors import ChangeDetectorError
from repo_change_detector.domain.repository import RepositoryRecord

# Text stored for a snapshot that has never been written
EMPTY_SNAPSHOT = "[]"


class ParseError(ChangeDetectorError):
    """Raised when a snapshot payload is malformed or has the wrong shape."""
    pass


def _record_from_node(node: Any, index: int) -> RepositoryRecord:
    if not isinstance(node, dict):
        raise ParseError(f"Snapshot element {index} is not an object")

    repo_id = node.get("id")
    # bool is a subclass of int
    if not isinstance(repo_id, int) or isinstance(repo_id, bool):
        raise ParseError(f"Snapshot element {index} has invalid id: {repo_id!r}")

    for field in ("name", "full_name"):
        if not isinstance(node.get(field), str):
            raise ParseError(f"Snapshot element {index} has invalid {field}: {node.get(field)!r}")

    description = node.get("description")
    if description is not None and not isinstance(description, str):
        raise ParseError(f"Snapshot element {index} has invalid description: {description!r}")

    return RepositoryRecord(
        id=repo_id,
        name=node["name"],
        full_name=node["full_name"],
        description=description
    )


def parse_snapshot(text: str) -> List[RepositoryRecord]:
    """
    Decode a snapshot payload into repository records.

    Fields other than id, name, full_name and description are ignored.

    Args:
        text: Raw JSON text, as returned by the API or read from the store

    Returns:
        Records in payload order

    Raises:
        ParseError: If the text is not a JSON array of repository objects
    """
    try:
        data = json.loads(text)
    except (TypeError, ValueError) as e:
        raise ParseError(f"Snapshot is not valid JSON: {e}") from e

    if not isinstance(data, list):
        raise ParseError(f"Snapshot must be a JSON array, got {type(data).__name__}")

    return [_record_from_node(node, index) for index, node in enumerate(data)]


def snapshots_differ(current_text: str, previous_text: str) -> bool:
    """Return True when the two raw payloads are not exactly equal."""
    return current_text != previous_text
