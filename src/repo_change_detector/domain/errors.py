"""Base exception for the change detector."""


class ChangeDetectorError(Exception):
    """Base class for errors raised while checking for repository changes."""
    pass
