"""Pending-operation marker for the two-file task mutations.

Creating or deleting a task touches both the index and a detail document.
The journal records which operation is in flight so that an interrupted one
is reported on the next run instead of going unnoticed. It never repairs.
"""

from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path
from typing import Literal

import yaml
from pydantic import BaseModel, Field, ValidationError

from ..errors import ParseError, StorageError
from ..paths import ProjectPaths
from .files import read_text, write_text_atomic

logger = logging.getLogger(__name__)


class PendingOperation(BaseModel):
    operation: Literal["create", "delete"]
    task_id: int = Field(..., ge=1)
    started: datetime

    def describe(self) -> str:
        return (
            f"unfinished {self.operation} of task {self.task_id} "
            f"started {self.started.isoformat()}"
        )


class OperationJournal:
    """Stores at most one pending operation next to the index."""

    def __init__(self, root: Path) -> None:
        self._path = ProjectPaths(Path(root)).pending_path

    @property
    def path(self) -> Path:
        return self._path

    def begin(self, operation: Literal["create", "delete"], task_id: int, started: datetime) -> PendingOperation:
        pending = PendingOperation(operation=operation, task_id=task_id, started=started)
        body = yaml.safe_dump(pending.model_dump(mode="json"), sort_keys=False)
        write_text_atomic(self._path, body)
        return pending

    def clear(self) -> None:
        try:
            self._path.unlink()
        except FileNotFoundError:
            return
        except OSError as exc:
            raise StorageError(f"removing {self._path}: {exc}") from exc

    def pending(self) -> PendingOperation | None:
        """Return the recorded operation, if an earlier run left one behind."""

        if not self._path.exists():
            return None
        raw = read_text(self._path, what="pending operation marker")
        try:
            return PendingOperation.model_validate(yaml.safe_load(raw))
        except (yaml.YAMLError, ValidationError) as exc:
            raise ParseError(f"malformed pending operation marker {self._path}: {exc}") from exc

    def abandon(self) -> None:
        """Clear the marker after a first step failed without touching disk."""

        try:
            self.clear()
        except StorageError as exc:
            logger.warning("Could not remove pending operation marker: %s", exc)


__all__ = ["OperationJournal", "PendingOperation"]
