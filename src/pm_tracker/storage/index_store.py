"""Persistence of the project index (``pm/index.yml``)."""

from __future__ import annotations

import logging
from pathlib import Path

import yaml
from pydantic import ValidationError

from ..errors import AlreadyExistsError, ParseError
from ..paths import index_path
from .files import read_text, write_text_atomic
from .models import Index, ProjectMeta

logger = logging.getLogger(__name__)


class IndexStore:
    """Reads and writes the whole index document for one project root."""

    def __init__(self, root: Path) -> None:
        self._root = Path(root)
        self._path = index_path(self._root)

    @property
    def path(self) -> Path:
        return self._path

    def create(self, meta: ProjectMeta, *, force: bool = False) -> Index:
        """Write a fresh, empty index for ``meta`` and return it."""

        index = Index(meta=meta, tasks=[])
        self.save(index, force=force)
        logger.info("Initialized index for project %r at %s", meta.name, self._path)
        return index

    def save(self, index: Index, *, force: bool = False) -> None:
        """Serialize ``index``; an existing file is only replaced when ``force`` is set."""

        if not force and self._path.exists():
            raise AlreadyExistsError(f"index already exists at {self._path}")

        body = yaml.safe_dump(index.to_document(), sort_keys=False, allow_unicode=True)
        write_text_atomic(self._path, body)
        logger.debug("Saved index with %d task(s) to %s", len(index.tasks), self._path)

    def load(self) -> Index:
        raw = read_text(self._path, what="index")
        try:
            document = yaml.safe_load(raw)
        except yaml.YAMLError as exc:
            raise ParseError(f"failed to parse YAML in {self._path}: {exc}") from exc

        if not isinstance(document, dict):
            raise ParseError(f"index at {self._path} is not a mapping")

        try:
            return Index.model_validate(document)
        except ValidationError as exc:
            raise ParseError(f"index validation error in {self._path}: {exc}") from exc


__all__ = ["IndexStore"]
