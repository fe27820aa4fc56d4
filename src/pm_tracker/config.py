"""Configuration management for the task tracker."""

from __future__ import annotations

from typing import Literal
import os

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class PmSettings(BaseSettings):
    """Runtime configuration sourced from environment variables."""

    model_config = SettingsConfigDict(extra="ignore")

    editor: str = Field(default="vim", validation_alias="EDITOR")
    log_level: str = Field(default="WARNING", validation_alias="PM_LOG_LEVEL")
    root_marker: str = Field(default=".git", validation_alias="PM_ROOT_MARKER")
    color: Literal["auto", "always", "never"] = Field(default="auto", validation_alias="PM_COLOR")

    @field_validator("editor")
    @classmethod
    def _normalize_editor(cls, value: str) -> str:
        normalized = value.strip()
        if not normalized:
            return "vim"
        return normalized

    @field_validator("log_level")
    @classmethod
    def _normalize_log_level(cls, value: str) -> str:
        normalized = value.strip().upper()
        if normalized not in {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}:
            raise ValueError(
                "PM_LOG_LEVEL must be one of CRITICAL, ERROR, WARNING, INFO, DEBUG"
            )
        return normalized

    @field_validator("root_marker")
    @classmethod
    def _validate_root_marker(cls, value: str) -> str:
        normalized = value.strip()
        if not normalized:
            raise ValueError("PM_ROOT_MARKER must not be empty")
        if "/" in normalized or (os.altsep and os.altsep in normalized) or os.sep in normalized:
            raise ValueError("PM_ROOT_MARKER must be a single directory name")
        return normalized

    @field_validator("color", mode="before")
    @classmethod
    def _normalize_color(cls, value):
        if isinstance(value, str):
            return value.strip().lower() or "auto"
        return value

    def use_color(self, isatty: bool) -> bool:
        """Return whether terminal output should carry ANSI styling."""

        if self.color == "always":
            return True
        if self.color == "never":
            return False
        return isatty and os.environ.get("NO_COLOR") is None


__all__ = ["PmSettings"]
