"""Terminal output for the board and single-task views.

Styling is plain ANSI SGR sequences and is switched off entirely when color is
disabled, so the same renderer serves terminals, pipes and tests.
"""

from __future__ import annotations

import re
import sys
from typing import TYPE_CHECKING, TextIO

from .storage import Status, Task, TaskDetail

if TYPE_CHECKING:
    from .registry import TaskRegistry

RESET = "\033[0m"
BOLD = "\033[1m"
DIM = "\033[2m"
ITALIC = "\033[3m"

CYAN = "\033[36m"
YELLOW = "\033[33m"
GREEN = "\033[32m"
MAGENTA = "\033[35m"
BLUE = "\033[34m"

STATUS_COLOR = {
    Status.TODO: CYAN,
    Status.DOING: YELLOW,
    Status.DONE: GREEN,
}

SECTION_RULE = "-" * 10
EMPTY_SECTION = "... no tasks found"

_HEADING_RE = re.compile(r"^(#{1,6})(\s+)(.*)$")
_BULLET_RE = re.compile(r"^(\s*)([-*+]|\d+[.)])(\s+)(.*)$")
_QUOTE_RE = re.compile(r"^(\s*>)(.*)$")
_INLINE_CODE_RE = re.compile(r"`[^`\n]+`")
_FENCE_RE = re.compile(r"^\s*(```|~~~)")


def _paint(text: str, *styles: str, enabled: bool) -> str:
    if not enabled or not styles:
        return text
    return "".join(styles) + text + RESET


def highlight_markdown(text: str, *, color: bool = True) -> str:
    """Return ``text`` with markdown structure emphasised for a terminal.

    Headings, list markers, block quotes, fenced blocks and inline code are
    styled; everything else passes through unchanged.
    """

    if not color:
        return text

    rendered: list[str] = []
    in_fence = False
    for line in text.splitlines(keepends=True):
        body = line.rstrip("\r\n")
        ending = line[len(body) :]

        if _FENCE_RE.match(body):
            in_fence = not in_fence
            rendered.append(_paint(body, DIM, enabled=True) + ending)
            continue
        if in_fence:
            rendered.append(_paint(body, MAGENTA, enabled=True) + ending)
            continue

        heading = _HEADING_RE.match(body)
        if heading:
            hashes, gap, title = heading.groups()
            rendered.append(_paint(hashes + gap + title, BOLD, BLUE, enabled=True) + ending)
            continue

        quote = _QUOTE_RE.match(body)
        if quote:
            rendered.append(_paint(body, DIM, ITALIC, enabled=True) + ending)
            continue

        bullet = _BULLET_RE.match(body)
        if bullet:
            indent, marker, gap, rest = bullet.groups()
            body = indent + _paint(marker, YELLOW, enabled=True) + gap + _inline_code(rest)
        else:
            body = _inline_code(body)
        rendered.append(body + ending)

    return "".join(rendered)


def _inline_code(text: str) -> str:
    return _INLINE_CODE_RE.sub(lambda match: _paint(match.group(0), MAGENTA, enabled=True), text)


class TerminalRenderer:
    """Writes tracker views to a text stream."""

    def __init__(self, stream: TextIO | None = None, *, color: bool = False) -> None:
        self._stream = stream or sys.stdout
        self._color = color

    def _write(self, text: str = "") -> None:
        self._stream.write(text + "\n")

    def task_line(self, task: Task, detail: TaskDetail) -> str:
        line = f"{_paint(f'{task.id:03d}', BOLD, enabled=self._color)}: {detail.summary}"
        if task.priority is not None:
            line += _paint(f" (p{task.priority})", YELLOW, enabled=self._color)
        if detail.tags:
            line += "\t\t" + _paint(f":{' '.join(detail.tags)}:", DIM, enabled=self._color)
        return line

    def board(self, registry: "TaskRegistry") -> None:
        """Print one section per live status, tasks in display order."""

        for status in Status.live():
            self._write(SECTION_RULE)
            self._write(_paint(str(status), BOLD, STATUS_COLOR[status], enabled=self._color))
            tasks = registry.sorted_tasks_with_status(status)
            if tasks is None:
                self._write(_paint(EMPTY_SECTION, DIM, enabled=self._color))
            else:
                for task in tasks:
                    self._write(self.task_line(task, registry.detail(task.id)))
            self._write()

    def task(self, task: Task, detail: TaskDetail) -> None:
        summary = detail.summary.strip()
        self._write(_paint(summary, BOLD, enabled=self._color))
        self._write("-" * len(summary))

        facts = [f"status: {_paint(str(task.status), STATUS_COLOR[task.status], enabled=self._color)}"]
        if task.priority is not None:
            facts.append(f"priority: {task.priority}")
        if detail.tags:
            facts.append(f"tags: {' '.join(detail.tags)}")
        self._write("  ".join(facts))

        description = detail.description.strip()
        if description:
            self._write()
            self._write(highlight_markdown(description, color=self._color))


__all__ = ["TerminalRenderer", "highlight_markdown"]
