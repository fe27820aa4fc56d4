"""Small filesystem helpers shared by the stores."""

from __future__ import annotations

import contextlib
import os
import tempfile
from pathlib import Path

from ..errors import NotFoundError, ParseError, StorageError


def write_text_atomic(path: Path, text: str) -> None:
    """Write ``text`` to a sibling temporary file, then move it over ``path``.

    Parent directories are created as needed. The canonical path holds either
    the previous content or the new content, never a partial write.
    """

    path = Path(path)
    tmp_path: Path | None = None
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with tempfile.NamedTemporaryFile(
            mode="w",
            encoding="utf-8",
            delete=False,
            dir=str(path.parent),
            prefix=f".{path.name}.",
            suffix=".tmp",
        ) as tmp:
            tmp_path = Path(tmp.name)
            tmp.write(text)
            tmp.flush()
            os.fsync(tmp.fileno())
        os.replace(tmp_path, path)
        tmp_path = None
    except OSError as exc:
        raise StorageError(f"writing {path}: {exc}") from exc
    finally:
        if tmp_path is not None:
            with contextlib.suppress(OSError):
                tmp_path.unlink()


def read_text(path: Path, *, what: str) -> str:
    """Read a UTF-8 document, translating filesystem errors."""

    try:
        return Path(path).read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise NotFoundError(f"{what} not found at {path}") from exc
    except UnicodeDecodeError as exc:
        raise ParseError(f"{what} at {path} is not valid UTF-8: {exc}") from exc
    except OSError as exc:
        raise StorageError(f"reading {path}: {exc}") from exc


__all__ = ["read_text", "write_text_atomic"]
