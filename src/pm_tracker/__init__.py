"""File-backed task tracking for a single project."""

__version__ = "0.1.0"

__all__ = ["__version__"]
