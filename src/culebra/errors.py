from __future__ import annotations

from typing import Optional


class CulebraError(Exception):
    """Base class for every error raised while loading a Lua configuration."""


class MissingPathError(CulebraError, ValueError):
    def __init__(self) -> None:
        super().__init__("Config file path is required")


class ConfigNotFoundError(CulebraError, FileNotFoundError):
    def __init__(self, path: str) -> None:
        super().__init__(f"Config file not found: {path}")
        self.path = path


class ExecutionError(CulebraError):
    """
    The script failed to parse or raised while running.

    `diagnostic` holds the Lua error message exactly as the engine reported it.
    """

    def __init__(self, path: str, diagnostic: str) -> None:
        super().__init__(f"Failed to execute lua config: {path}: {diagnostic}")
        self.path = path
        self.diagnostic = diagnostic


class ConversionError(CulebraError, TypeError):
    def __init__(self, message: str, *, key: Optional[str] = None) -> None:
        if key is not None:
            message = f"{message} (key={key})"
        super().__init__(message)
        self.key = key
