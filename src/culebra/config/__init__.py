"""Lua configuration loading."""

from culebra.config.loader import (
    BUILTIN_GLOBALS,
    load,
    load_with_arrays,
    load_with_arrays_and_globals,
    load_with_globals,
)
from culebra.config.models import LoadConfig, LoggingSettings

__all__ = [
    "BUILTIN_GLOBALS",
    "LoadConfig",
    "LoggingSettings",
    "load",
    "load_with_arrays",
    "load_with_arrays_and_globals",
    "load_with_globals",
]
