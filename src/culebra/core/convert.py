from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Callable, Iterable, Optional, Tuple

from lupa import LuaRuntime, lua_type

from culebra.core.models import GenericMapping, GenericValue
from culebra.errors import ConversionError

_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1


def from_lua(value: Any, convert_arrays: bool = False) -> GenericValue:
    """
    Convert a value produced by the Lua runtime into plain Python data.

    Tables become dicts with string keys, or lists when `convert_arrays` is set and
    the table is a non-empty array (see `is_lua_array`). Every number becomes a float.

    Values outside nil/boolean/number/string/table (functions, userdata, coroutines)
    are not part of the data model and are returned as their `tostring` text.
    """
    if value is None:
        return None
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        return value
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    if lua_type(value) == "table":
        if convert_arrays and is_lua_array(value):
            return [from_lua(value[i], convert_arrays) for i in range(1, len(value) + 1)]
        return table_to_dict(value, convert_arrays)
    return str(value)


def is_lua_array(table: Any) -> bool:
    """Return True when the keys of `table` are exactly the integers 1..#table."""
    length = len(table)
    if length == 0:
        return False

    count = 0
    for key in table.keys():
        if isinstance(key, bool) or not isinstance(key, (int, float)):
            return False
        if isinstance(key, float) and not key.is_integer():
            return False
        if key < 1 or key > length:
            return False
        count += 1
    # Lua never stores nil, so fewer keys than #table means a hole.
    return count == length


def table_to_dict(
    table: Any,
    convert_arrays: bool = False,
    *,
    skip: Optional[Callable[[str], bool]] = None,
) -> GenericMapping:
    """
    Convert every pair of `table` into a dict keyed by the stringified Lua key.

    Non-string keys are written before string keys, so `t["1"]` wins over `t[1]`
    when both exist. `skip` filters entries by their stringified key.
    """
    result: GenericMapping = {}
    for key, value in _ordered_items(table.items()):
        name = _key_to_str(key)
        if skip is not None and skip(name):
            continue
        result[name] = from_lua(value, convert_arrays)
    return result


def to_lua(runtime: LuaRuntime, value: Any) -> Any:
    """
    Convert plain Python data into a value that can be stored in `runtime`.

    Accepts None, bool, int, float, str, mappings with string keys and lists/tuples.
    Strings are passed as UTF-8 bytes so they stay Lua strings in a runtime created
    with `encoding=None`. Anything else raises ConversionError; there is no string
    fallback.
    """
    if value is None or isinstance(value, (bool, float)):
        return value
    if isinstance(value, str):
        return value.encode("utf-8")
    if isinstance(value, int):
        if _INT64_MIN <= value <= _INT64_MAX:
            return value
        return float(value)
    if isinstance(value, Mapping):
        table = runtime.table()
        for key, item in value.items():
            if not isinstance(key, str):
                raise ConversionError(
                    f"Mapping keys must be strings, got {type(key).__name__}", key=repr(key)
                )
            table[key.encode("utf-8")] = to_lua(runtime, item)
        return table
    if isinstance(value, (list, tuple)):
        table = runtime.table()
        for index, item in enumerate(value, 1):
            table[index] = to_lua(runtime, item)
        return table
    raise ConversionError(f"Unsupported value type for Lua conversion: {type(value).__name__}")


def _ordered_items(items: Iterable[Tuple[Any, Any]]) -> list[Tuple[Any, Any]]:
    numeric: list[Tuple[Any, Any]] = []
    named: list[Tuple[Any, Any]] = []
    for key, value in items:
        (named if isinstance(key, (str, bytes)) else numeric).append((key, value))
    return numeric + named


def _key_to_str(key: Any) -> str:
    if isinstance(key, str):
        return key
    if isinstance(key, bytes):
        return key.decode("utf-8", errors="replace")
    if isinstance(key, bool):
        return "true" if key else "false"
    if isinstance(key, int):
        return str(key)
    if isinstance(key, float):
        if key.is_integer():
            return str(int(key))
        return repr(key)
    return str(key)
