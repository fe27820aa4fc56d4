"""Storage layer for the task index and detail documents."""

from .detail_store import DetailStore, create_detail, parse_detail, render_detail, split_entry
from .index_store import IndexStore
from .journal import OperationJournal, PendingOperation
from .models import Index, ProjectMeta, Status, StatusChange, Task, TaskDetail

__all__ = [
    "DetailStore",
    "Index",
    "IndexStore",
    "OperationJournal",
    "PendingOperation",
    "ProjectMeta",
    "Status",
    "StatusChange",
    "Task",
    "TaskDetail",
    "create_detail",
    "parse_detail",
    "render_detail",
    "split_entry",
]
