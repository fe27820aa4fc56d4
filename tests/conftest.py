from __future__ import annotations

from typing import Iterable

import pytest

from pm_tracker.editor import EditorLauncher, EditorResult


class FakeEditorLauncher(EditorLauncher):
    """Records edit requests and replays canned exit codes without spawning anything."""

    def __init__(self, returncodes: Iterable[int] | None = None) -> None:  # type: ignore[override]
        self.returncodes = list(returncodes or [])
        self._argv = ["fake-editor"]
        self.invocations: list[tuple[str, ...]] = []

    def _invoke(self, *args: str) -> EditorResult:  # type: ignore[override]
        self.invocations.append(tuple(args))
        returncode = self.returncodes.pop(0) if self.returncodes else 0
        return EditorResult(args=tuple(args), returncode=returncode)


@pytest.fixture
def fake_editor(monkeypatch: pytest.MonkeyPatch) -> FakeEditorLauncher:
    """Route the CLI's editor through a recording fake."""

    fake = FakeEditorLauncher()
    monkeypatch.setattr("pm_tracker.cli.EditorLauncher", lambda command: fake)
    return fake
