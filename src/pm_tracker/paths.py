"""Locate the project root and derive the tracker's file paths from it."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from .errors import NotFoundError

PM_DIRNAME = "pm"
INDEX_FILENAME = "index.yml"
TASKS_DIRNAME = "tasks"
DETAIL_SUFFIX = ".md"
PENDING_FILENAME = ".pending.yml"
DEFAULT_MARKER = ".git"


def find_project_root(start: Path | str, marker: str = DEFAULT_MARKER) -> Path:
    """Return the nearest directory at or above ``start`` containing ``marker``.

    ``start`` is resolved first, so the walk follows the real ancestor chain
    and always terminates at the filesystem root.
    """

    try:
        current = Path(start).expanduser().resolve()
    except (RuntimeError, OSError) as exc:
        # Symlink loops raise RuntimeError before 3.13 and OSError(ELOOP) after.
        raise NotFoundError(f"cannot resolve {start}: {exc}") from exc
    for candidate in (current, *current.parents):
        if (candidate / marker).is_dir():
            return candidate
    raise NotFoundError(f"could not find a {marker} directory at or above {current}")


def index_path(root: Path) -> Path:
    return Path(root) / PM_DIRNAME / INDEX_FILENAME


def detail_path(root: Path, task_id: int) -> Path:
    return Path(root) / PM_DIRNAME / TASKS_DIRNAME / f"{task_id:03d}{DETAIL_SUFFIX}"


@dataclass(frozen=True, slots=True)
class ProjectPaths:
    """Every path the tracker touches, derived from one project root."""

    root: Path

    @property
    def pm_dir(self) -> Path:
        return self.root / PM_DIRNAME

    @property
    def index_path(self) -> Path:
        return index_path(self.root)

    @property
    def tasks_dir(self) -> Path:
        return self.pm_dir / TASKS_DIRNAME

    @property
    def pending_path(self) -> Path:
        return self.pm_dir / PENDING_FILENAME

    def detail_path(self, task_id: int) -> Path:
        return detail_path(self.root, task_id)


__all__ = [
    "DETAIL_SUFFIX",
    "ProjectPaths",
    "detail_path",
    "find_project_root",
    "index_path",
]
