"""Runs the user's editor against a detail document."""

from __future__ import annotations

import logging
import shlex
import shutil
import subprocess
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)


class EditorError(RuntimeError):
    """Raised when the editor cannot be run or exits unsuccessfully."""

    def __init__(self, message: str, *, returncode: int | None = None) -> None:
        super().__init__(message)
        self.returncode = returncode


class EditorNotFoundError(EditorError):
    """Raised when the editor executable cannot be located."""


@dataclass(slots=True)
class EditorResult:
    """Holds the outcome of an editor session."""

    args: tuple[str, ...]
    returncode: int

    @property
    def ok(self) -> bool:
        return self.returncode == 0


class EditorLauncher:
    """Spawn an editor command and wait for it to exit."""

    def __init__(self, command: str) -> None:
        self._argv = self._resolve_command(command)

    @staticmethod
    def _resolve_command(command: str) -> list[str]:
        try:
            argv = shlex.split(command)
        except ValueError as exc:
            raise EditorError(f"cannot parse editor command {command!r}: {exc}") from exc
        if not argv:
            raise EditorNotFoundError("editor command is empty")

        binary = shutil.which(argv[0])
        if binary is None:
            raise EditorNotFoundError(f"editor executable {argv[0]!r} not found on PATH")
        return [binary, *argv[1:]]

    @property
    def argv(self) -> tuple[str, ...]:
        return tuple(self._argv)

    def edit(self, path: Path) -> EditorResult:
        """Open ``path`` and block until the editor exits; non-zero exit raises."""

        result = self._invoke(*self._argv, str(path))
        if not result.ok:
            raise EditorError(
                f"editor command exited with status {result.returncode}",
                returncode=result.returncode,
            )
        return result

    def _invoke(self, *args: str) -> EditorResult:
        logger.debug("Launching editor: %s", " ".join(args))
        try:
            completed = subprocess.run(list(args), check=False)
        except OSError as exc:
            raise EditorError(f"spawning editor {args[0]!r}: {exc}") from exc
        return EditorResult(args=tuple(args), returncode=completed.returncode)

