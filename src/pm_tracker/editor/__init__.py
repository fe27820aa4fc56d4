"""External editor invocation for detail documents."""

from .launcher import EditorError, EditorLauncher, EditorNotFoundError, EditorResult

__all__ = [
    "EditorError",
    "EditorLauncher",
    "EditorNotFoundError",
    "EditorResult",
]
