"""Exception taxonomy shared by the stores and the registry."""

from __future__ import annotations


class PmError(Exception):
    """Base class for task tracker errors."""


class AlreadyExistsError(PmError):
    """Raised when creating an index over an existing one without ``force``."""


class NotFoundError(PmError):
    """Raised for a missing project root, index, task or detail document."""


class ParseError(PmError, ValueError):
    """Raised when a persisted document or a status name cannot be parsed."""


class StorageError(PmError):
    """Raised for filesystem failures other than a missing file."""


class InvalidTransitionError(PmError, ValueError):
    """Raised when a task is moved to a status that cannot be a live state."""


__all__ = [
    "AlreadyExistsError",
    "InvalidTransitionError",
    "NotFoundError",
    "ParseError",
    "PmError",
    "StorageError",
]
