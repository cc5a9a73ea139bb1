from __future__ import annotations

import os
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class LoadConfig(BaseModel):
    """
    Inputs for a single Lua config load.

    `globals` are bound in the Lua runtime before the script runs. With
    `convert_arrays` set, array-shaped tables come back as lists instead of dicts
    keyed by "1", "2", ...
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    file_path: str = ""
    globals: dict[str, Any] = Field(default_factory=dict)
    convert_arrays: bool = False

    @field_validator("file_path", mode="before")
    @classmethod
    def _coerce_path(cls, value: Any) -> Any:
        if isinstance(value, os.PathLike):
            return os.fspath(value)
        return value


class FileRotationSettings(BaseModel):
    """
    Date-based rotation settings (daily).

    This maps cleanly to Python's standard library TimedRotatingFileHandler behavior.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    backup_count: int = 5


class FileLoggingSettings(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    path: str = "logs/culebra.log"
    rotation: FileRotationSettings = Field(default_factory=FileRotationSettings)


class LoggingSettings(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    level: str = "WARNING"
    file: Optional[FileLoggingSettings] = None
