"""Conversion between Lua values and plain Python data."""

from culebra.core.convert import from_lua, is_lua_array, table_to_dict, to_lua
from culebra.core.models import GenericMapping, GenericSequence, GenericValue, LoadResult

__all__ = [
    "GenericMapping",
    "GenericSequence",
    "GenericValue",
    "LoadResult",
    "from_lua",
    "is_lua_array",
    "table_to_dict",
    "to_lua",
]
