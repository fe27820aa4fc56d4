from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from pm_tracker.errors import ParseError
from pm_tracker.storage import Index, ProjectMeta, Status, StatusChange, Task, TaskDetail

CREATED = datetime(2024, 3, 1, 9, 30, tzinfo=timezone.utc)


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("Todo", Status.TODO),
        ("doing", Status.DOING),
        ("  DONE ", Status.DONE),
        ("None", Status.NONE),
    ],
)
def test_status_parse_accepts_names(raw: str, expected: Status) -> None:
    assert Status.parse(raw) is expected


@pytest.mark.parametrize("raw", ["", "in-progress", "todo!", "finished"])
def test_status_parse_rejects_unknown_names(raw: str) -> None:
    with pytest.raises(ParseError):
        Status.parse(raw)


def test_status_serializes_as_name() -> None:
    assert str(Status.DOING) == "Doing"
    assert Status.live() == (Status.TODO, Status.DOING, Status.DONE)


def test_new_task_starts_with_synthetic_transition() -> None:
    task = Task.new(4, CREATED)

    assert task.status is Status.TODO
    assert task.priority is None
    assert task.changes == [StatusChange(from_=Status.NONE, to=Status.TODO, on=CREATED)]


def test_status_change_is_immutable() -> None:
    change = StatusChange(from_=Status.TODO, to=Status.DONE, on=CREATED)

    with pytest.raises(ValidationError):
        change.to = Status.DOING  # type: ignore[misc]


def test_status_change_rejects_none_target() -> None:
    with pytest.raises(ValidationError):
        StatusChange(from_=Status.TODO, to=Status.NONE, on=CREATED)


def test_naive_timestamps_are_treated_as_utc() -> None:
    change = StatusChange(from_=Status.TODO, to=Status.DONE, on=datetime(2024, 1, 1, 12, 0))

    assert change.on.tzinfo is not None
    assert change.on.utcoffset() == timedelta(0)


def test_task_status_must_match_last_change() -> None:
    with pytest.raises(ValidationError):
        Task(
            id=1,
            status=Status.DONE,
            changes=[StatusChange(from_=Status.NONE, to=Status.TODO, on=CREATED)],
        )


def test_task_history_must_start_from_none() -> None:
    with pytest.raises(ValidationError):
        Task(
            id=1,
            status=Status.DONE,
            changes=[StatusChange(from_=Status.TODO, to=Status.DONE, on=CREATED)],
        )


def test_task_requires_history_and_positive_priority() -> None:
    with pytest.raises(ValidationError):
        Task(id=1, status=Status.TODO, changes=[])
    with pytest.raises(ValidationError):
        Task.model_validate(
            {
                "id": 1,
                "status": "Todo",
                "changes": [{"from": "None", "to": "Todo", "on": CREATED.isoformat()}],
                "priority": 0,
            }
        )


def test_index_document_uses_wire_names() -> None:
    tz = timezone(timedelta(hours=2))
    task = Task.new(1, datetime(2024, 5, 6, 7, 8, 9, tzinfo=tz))
    index = Index(meta=ProjectMeta(name="demo"), tasks=[task])

    document = index.to_document()

    change = document["tasks"][0]["changes"][0]
    assert change["from"] == "None"
    assert change["to"] == "Todo"
    assert change["on"].endswith("+02:00")
    assert document["tasks"][0]["priority"] is None
    assert Index.model_validate(document) == index


def test_index_rejects_duplicate_ids() -> None:
    task = Task.new(1, CREATED)

    with pytest.raises(ValidationError):
        Index(meta=ProjectMeta(name="demo"), tasks=[task, task.model_copy()])


def test_index_tolerates_null_task_list() -> None:
    index = Index.model_validate({"meta": {"name": "demo"}, "tasks": None})

    assert index.tasks == []


def test_task_detail_defaults() -> None:
    detail = TaskDetail.model_validate({"id": 2, "summary": None, "tags": None})

    assert detail.summary == ""
    assert detail.tags == []
    assert detail.description == ""
    assert detail.header() == {"id": 2, "summary": "", "tags": []}
