"""Persisted models for the task index and the per-task detail documents."""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from ..errors import ParseError


class Status(str, Enum):
    """Lifecycle state of a task.

    ``NONE`` only ever appears as the ``from`` side of a task's first change.
    """

    NONE = "None"
    TODO = "Todo"
    DOING = "Doing"
    DONE = "Done"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def parse(cls, value: str) -> "Status":
        """Map a status name to its member, ignoring case and surrounding space."""

        normalized = str(value).strip().lower()
        for member in cls:
            if member.value.lower() == normalized:
                return member
        names = ", ".join(member.value for member in cls)
        raise ParseError(f"unknown status {value!r}; expected one of {names}")

    @classmethod
    def live(cls) -> tuple["Status", ...]:
        """Statuses a task can currently be in, in board order."""

        return (cls.TODO, cls.DOING, cls.DONE)


def _coerce_status(value: Any) -> Any:
    # Hand-edited documents get the same case rules as the command line.
    if isinstance(value, str):
        return Status.parse(value)
    return value


class StatusChange(BaseModel):
    """One recorded status transition."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    from_: Status = Field(..., alias="from")
    to: Status
    on: datetime

    @model_validator(mode="before")
    @classmethod
    def _restore_on_key(cls, data: Any):  # type: ignore[override]
        # YAML 1.1 reads a bare ``on:`` key as the boolean True.
        if isinstance(data, dict) and True in data and "on" not in data:
            data = dict(data)
            data["on"] = data.pop(True)
        return data

    @field_validator("from_", "to", mode="before")
    @classmethod
    def _parse_status(cls, value: Any):  # type: ignore[override]
        return _coerce_status(value)

    @field_validator("to")
    @classmethod
    def _reject_sentinel_target(cls, value: Status) -> Status:
        if value is Status.NONE:
            raise ValueError("a status change cannot lead to None")
        return value

    @field_validator("on")
    @classmethod
    def _ensure_aware(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value


class Task(BaseModel):
    """Index entry for a single task."""

    id: int = Field(..., ge=1)
    status: Status
    changes: list[StatusChange]
    priority: int | None = Field(default=None, ge=1)

    @field_validator("status", mode="before")
    @classmethod
    def _parse_status(cls, value: Any):  # type: ignore[override]
        return _coerce_status(value)

    @model_validator(mode="after")
    def _check_history(self) -> "Task":
        if not self.changes:
            raise ValueError(f"task {self.id} has no status history")
        first = self.changes[0]
        if first.from_ is not Status.NONE or first.to is not Status.TODO:
            raise ValueError(f"task {self.id} history must start with None -> Todo")
        if self.status is not self.changes[-1].to:
            raise ValueError(
                f"task {self.id} status {self.status} does not match its last change"
            )
        return self

    @classmethod
    def new(cls, task_id: int, created_on: datetime) -> "Task":
        change = StatusChange(from_=Status.NONE, to=Status.TODO, on=created_on)
        return cls(id=task_id, status=Status.TODO, changes=[change])


class ProjectMeta(BaseModel):
    name: str


class Index(BaseModel):
    """Root document of ``pm/index.yml``."""

    meta: ProjectMeta
    tasks: list[Task] = Field(default_factory=list)

    @field_validator("tasks", mode="before")
    @classmethod
    def _ensure_list(cls, value: Any):  # type: ignore[override]
        if value is None:
            return []
        return value

    @model_validator(mode="after")
    def _check_unique_ids(self) -> "Index":
        seen: set[int] = set()
        for task in self.tasks:
            if task.id in seen:
                raise ValueError(f"duplicate task id {task.id}")
            seen.add(task.id)
        return self

    def to_document(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


class TaskDetail(BaseModel):
    """Descriptive content of a task, stored one file per task."""

    id: int = Field(..., ge=1)
    summary: str = ""
    tags: list[str] = Field(default_factory=list)
    description: str = ""

    @field_validator("summary", "description", mode="before")
    @classmethod
    def _ensure_text(cls, value: Any):  # type: ignore[override]
        if value is None:
            return ""
        return value

    @field_validator("tags", mode="before")
    @classmethod
    def _ensure_tags(cls, value: Any):  # type: ignore[override]
        if value is None:
            return []
        if isinstance(value, (list, tuple)):
            return [str(tag) for tag in value]
        raise ValueError("tags must be a sequence of strings")

    def header(self) -> dict[str, Any]:
        return {"id": self.id, "summary": self.summary, "tags": list(self.tags)}


__all__ = ["Index", "ProjectMeta", "Status", "StatusChange", "Task", "TaskDetail"]
