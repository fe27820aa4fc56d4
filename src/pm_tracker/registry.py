"""In-memory task registry backed by the index and detail stores."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, Sequence

from .errors import InvalidTransitionError, NotFoundError, ParseError, PmError
from .storage import (
    DetailStore,
    Index,
    IndexStore,
    OperationJournal,
    PendingOperation,
    ProjectMeta,
    Status,
    StatusChange,
    Task,
    TaskDetail,
    create_detail,
)

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def display_key(task: Task) -> tuple[int, int, int]:
    """Sort key placing every prioritized task ahead of every unprioritized one."""

    if task.priority is not None:
        return (0, task.priority, task.id)
    return (1, 0, task.id)


class TaskRegistry:
    """Owns the loaded index for the duration of one command.

    Mutations are written through immediately: the index with ``force=True``
    and, where relevant, the task's detail document. Detail documents are never
    cached; every read goes to the detail store.
    """

    def __init__(
        self,
        index: Index,
        *,
        index_store: IndexStore,
        detail_store: DetailStore,
        journal: OperationJournal,
        clock: Clock | None = None,
        pending: PendingOperation | None = None,
    ) -> None:
        self._index = index
        self._index_store = index_store
        self._detail_store = detail_store
        self._journal = journal
        self._clock = clock or _utc_now
        self._pending = pending

    @classmethod
    def load(cls, root: Path, *, clock: Clock | None = None) -> "TaskRegistry":
        """Load the index under ``root`` and report any unfinished operation."""

        root = Path(root)
        index_store = IndexStore(root)
        index = index_store.load()
        journal = OperationJournal(root)
        pending = journal.pending()
        if pending is not None:
            logger.info(
                "Found %s; inspect %s and remove %s once reconciled",
                pending.describe(),
                index_store.path.parent,
                journal.path,
            )
        return cls(
            index,
            index_store=index_store,
            detail_store=DetailStore(root),
            journal=journal,
            clock=clock,
            pending=pending,
        )

    @classmethod
    def initialize(cls, root: Path, name: str, *, force: bool = False) -> Index:
        """Create the project index under ``root``."""

        return IndexStore(Path(root)).create(ProjectMeta(name=name), force=force)

    @property
    def meta(self) -> ProjectMeta:
        return self._index.meta

    @property
    def tasks(self) -> list[Task]:
        return list(self._index.tasks)

    @property
    def pending(self) -> PendingOperation | None:
        return self._pending

    def next_id(self) -> int:
        if not self._index.tasks:
            return 1
        return max(task.id for task in self._index.tasks) + 1

    def get_task(self, task_id: int) -> Task | None:
        for task in self._index.tasks:
            if task.id == task_id:
                return task
        return None

    def create_task(self, words: Sequence[str]) -> Task:
        """Add a ``Todo`` task described by ``words`` and persist both documents."""

        now = self._clock()
        task = Task.new(self.next_id(), now)
        detail = create_detail(task.id, words)

        self._journal.begin("create", task.id, now)
        self._index.tasks.append(task)
        try:
            self._index_store.save(self._index, force=True)
        except PmError:
            self._index.tasks.pop()
            self._journal.abandon()
            raise
        self._detail_store.save(detail)
        self._journal.clear()

        logger.info("Created task %d: %s", task.id, detail.summary)
        return task

    def move_task(self, task_id: int, status: Status) -> Task:
        """Move a task to ``status``; moving to its current status records nothing."""

        if status is Status.NONE:
            raise InvalidTransitionError("tasks cannot be moved to None")

        task = self.get_task(task_id)
        if task is None:
            raise NotFoundError(f"task {task_id} not found in index")

        if task.status is status:
            logger.debug("Task %d already %s; nothing to record", task_id, status)
            return task

        change = StatusChange(from_=task.status, to=status, on=self._clock())
        task.changes.append(change)
        task.status = status
        self._index_store.save(self._index, force=True)
        logger.info("Moved task %d from %s to %s", task_id, change.from_, change.to)
        return task

    def delete_task(self, task_id: int) -> None:
        """Remove a task's detail document, then its index entry.

        When the document cannot be deleted the index is left as it was.
        """

        self._journal.begin("delete", task_id, self._clock())
        try:
            self._detail_store.delete(task_id)
        except PmError:
            self._journal.abandon()
            raise

        task = self.get_task(task_id)
        if task is None:
            logger.warning("Deleted detail for task %d, which had no index entry", task_id)
        else:
            self._index.tasks.remove(task)
            self._index_store.save(self._index, force=True)
        self._journal.clear()
        logger.info("Deleted task %d", task_id)

    def sorted_tasks_with_status(self, status: Status) -> list[Task] | None:
        """Return tasks in ``status`` in display order, or ``None`` if there are none."""

        matching = [task for task in self._index.tasks if task.status is status]
        if not matching:
            return None
        return sorted(matching, key=display_key)

    def detail(self, task_id: int) -> TaskDetail:
        return self._detail_store.load(task_id)

    def detail_path(self, task_id: int) -> Path:
        return self._detail_store.path(task_id)

    def check_consistency(self) -> list[str]:
        """Describe every disagreement between the index and the detail documents."""

        problems: list[str] = []
        if self._pending is not None:
            problems.append(self._pending.describe())

        indexed = {task.id for task in self._index.tasks}
        on_disk = set(self._detail_store.list_ids())

        for task_id in sorted(indexed - on_disk):
            problems.append(
                f"task {task_id} has no detail document at {self.detail_path(task_id)}"
            )
        for task_id in sorted(on_disk - indexed):
            problems.append(f"detail document {self.detail_path(task_id)} has no index entry")
        for task_id in sorted(indexed & on_disk):
            try:
                self._detail_store.load(task_id)
            except ParseError as exc:
                problems.append(str(exc))

        return problems


__all__ = ["TaskRegistry", "display_key"]
