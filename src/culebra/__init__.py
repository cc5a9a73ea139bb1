"""Load Lua configuration scripts into plain Python data."""

from culebra.config.loader import (
    BUILTIN_GLOBALS,
    load,
    load_with_arrays,
    load_with_arrays_and_globals,
    load_with_globals,
)
from culebra.config.models import LoadConfig
from culebra.core.convert import from_lua, is_lua_array, to_lua
from culebra.core.models import GenericValue, LoadResult
from culebra.errors import (
    ConfigNotFoundError,
    ConversionError,
    CulebraError,
    ExecutionError,
    MissingPathError,
)
from culebra.registry import (
    Registry,
    Settings,
    auto_bind_to_registry,
    bind_to_registry,
    bind_to_registry_with_arrays,
)

__all__ = [
    "BUILTIN_GLOBALS",
    "ConfigNotFoundError",
    "ConversionError",
    "CulebraError",
    "ExecutionError",
    "GenericValue",
    "LoadConfig",
    "LoadResult",
    "MissingPathError",
    "Registry",
    "Settings",
    "auto_bind_to_registry",
    "bind_to_registry",
    "bind_to_registry_with_arrays",
    "from_lua",
    "is_lua_array",
    "load",
    "load_with_arrays",
    "load_with_arrays_and_globals",
    "load_with_globals",
    "to_lua",
]
