"""Per-task detail documents (``pm/tasks/NNN.md``).

A document is a YAML header holding ``id``, ``summary`` and ``tags``, a line
containing only ``---``, and then the free-text description verbatim::

    id: 3
    summary: Fix the parser
    tags:
    - bug
    ---
    Anything the user writes here.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, Sequence

import yaml
from pydantic import ValidationError

from ..errors import NotFoundError, ParseError, StorageError
from ..paths import DETAIL_SUFFIX, ProjectPaths
from .files import read_text, write_text_atomic
from .models import TaskDetail

logger = logging.getLogger(__name__)

SEPARATOR = "---"
TAG_MARKER = ":"


def _tag_name(word: str) -> str | None:
    if len(word) > 2 and word.startswith(TAG_MARKER) and word.endswith(TAG_MARKER):
        return word[1:-1]
    return None


def split_entry(words: Iterable[str]) -> tuple[str, list[str]]:
    """Split entry words into a summary and the ``:tag:`` words, order preserved."""

    summary_words: list[str] = []
    tags: list[str] = []
    for word in words:
        tag = _tag_name(word)
        if tag is None:
            summary_words.append(word)
        else:
            tags.append(tag)
    return " ".join(summary_words), tags


def create_detail(task_id: int, words: Sequence[str]) -> TaskDetail:
    """Build the detail document for a new task from its entry words."""

    summary, tags = split_entry(words)
    return TaskDetail(id=task_id, summary=summary, tags=tags, description="")


def render_detail(detail: TaskDetail) -> str:
    header = yaml.safe_dump(detail.header(), sort_keys=False, allow_unicode=True)
    return f"{header}{SEPARATOR}\n{detail.description}"


def parse_detail(text: str, *, source: str = "<detail>") -> TaskDetail:
    lines = text.splitlines(keepends=True)
    for position, line in enumerate(lines):
        if line.rstrip("\r\n") == SEPARATOR:
            break
    else:
        raise ParseError(f"missing '{SEPARATOR}' separator in {source}")

    header_text = "".join(lines[:position])
    description = "".join(lines[position + 1 :])
    try:
        header = yaml.safe_load(header_text)
    except yaml.YAMLError as exc:
        raise ParseError(f"failed to parse header of {source}: {exc}") from exc

    if not isinstance(header, dict):
        raise ParseError(f"header of {source} is not a mapping")

    try:
        return TaskDetail.model_validate({**header, "description": description})
    except ValidationError as exc:
        raise ParseError(f"detail validation error in {source}: {exc}") from exc


class DetailStore:
    """Loads and saves detail documents below one project root."""

    def __init__(self, root: Path) -> None:
        self._paths = ProjectPaths(Path(root))

    def path(self, task_id: int) -> Path:
        return self._paths.detail_path(task_id)

    def exists(self, task_id: int) -> bool:
        return self.path(task_id).is_file()

    def save(self, detail: TaskDetail) -> None:
        path = self.path(detail.id)
        write_text_atomic(path, render_detail(detail))
        logger.debug("Saved detail for task %d to %s", detail.id, path)

    def load(self, task_id: int) -> TaskDetail:
        path = self.path(task_id)
        detail = parse_detail(read_text(path, what=f"detail for task {task_id}"), source=str(path))
        if detail.id != task_id:
            raise ParseError(f"{path} declares id {detail.id}, expected {task_id}")
        return detail

    def delete(self, task_id: int) -> None:
        path = self.path(task_id)
        try:
            path.unlink()
        except FileNotFoundError as exc:
            raise NotFoundError(f"detail for task {task_id} not found at {path}") from exc
        except OSError as exc:
            raise StorageError(f"deleting {path}: {exc}") from exc
        logger.debug("Deleted detail for task %d at %s", task_id, path)

    def list_ids(self) -> list[int]:
        """Return the ids of every detail document present on disk."""

        tasks_dir = self._paths.tasks_dir
        if not tasks_dir.is_dir():
            return []
        ids: list[int] = []
        for path in tasks_dir.glob(f"*{DETAIL_SUFFIX}"):
            if path.stem.isdigit():
                ids.append(int(path.stem))
        return sorted(ids)


__all__ = [
    "DetailStore",
    "SEPARATOR",
    "create_detail",
    "parse_detail",
    "render_detail",
    "split_entry",
]
