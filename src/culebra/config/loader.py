from __future__ import annotations

import logging
import os
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Iterator, Mapping, Optional, Union

from lupa import LuaError, LuaRuntime, lua_type

from culebra.config.models import LoadConfig
from culebra.core.convert import table_to_dict, to_lua
from culebra.core.models import LoadResult
from culebra.errors import ConfigNotFoundError, ConversionError, ExecutionError, MissingPathError

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]

# Names the Lua runtime defines on its own; never reported as configuration.
BUILTIN_GLOBALS: frozenset[str] = frozenset(
    {
        # version markers
        "_VERSION",
        # base library
        "assert",
        "collectgarbage",
        "dofile",
        "error",
        "getfenv",
        "getmetatable",
        "ipairs",
        "load",
        "loadfile",
        "loadstring",
        "module",
        "newproxy",
        "next",
        "pairs",
        "pcall",
        "print",
        "rawequal",
        "rawget",
        "rawlen",
        "rawset",
        "require",
        "select",
        "setfenv",
        "setmetatable",
        "tonumber",
        "tostring",
        "type",
        "unpack",
        "warn",
        "xpcall",
        # library namespaces
        "bit32",
        "coroutine",
        "debug",
        "io",
        "math",
        "os",
        "package",
        "string",
        "table",
        "utf8",
        # engine extras (lupa, LuaJIT, other embedders)
        "_printregs",
        "bit",
        "channel",
        "jit",
        "python",
    }
)

_GLOBALS_TABLE = "_G"


def is_builtin_global(name: str) -> bool:
    return name == _GLOBALS_TABLE or name in BUILTIN_GLOBALS


@contextmanager
def lua_runtime() -> Iterator[LuaRuntime]:
    """Create an isolated Lua runtime that lives for the duration of the block."""
    # Lua strings arrive as bytes; decoding happens in from_lua.
    runtime = LuaRuntime(encoding=None, unpack_returned_tuples=True, register_eval=False)
    try:
        yield runtime
    finally:
        # The interpreter state is freed with the last reference to the runtime.
        del runtime


def load(config: LoadConfig) -> LoadResult:
    """
    Run a Lua config file and return its settings as plain Python data.

    A table returned by the script is used as the result. Otherwise every global
    the script leaves behind is collected, except the runtime's own built-ins.
    """
    if not config.file_path:
        raise MissingPathError()

    path = Path(config.file_path)
    if not path.is_file():
        raise ConfigNotFoundError(config.file_path)

    logger.debug(
        "config.load_start path=%s convert_arrays=%s globals=%d",
        path,
        config.convert_arrays,
        len(config.globals),
    )

    with lua_runtime() as runtime:
        lua_globals = runtime.globals()
        dofile = lua_globals[b"dofile"]

        for name, value in config.globals.items():
            try:
                lua_globals[name.encode("utf-8")] = to_lua(runtime, value)
            except ConversionError as exc:
                raise ConversionError(f"Cannot bind global '{name}': {exc}") from exc
            except RecursionError as exc:
                raise ConversionError(f"Cannot bind global '{name}': value is nested too deeply or cyclic") from exc

        try:
            returned = dofile(os.fsencode(path))
        except LuaError as exc:
            raise ExecutionError(str(path), str(exc)) from exc

        if isinstance(returned, tuple):
            returned = returned[-1] if returned else None

        try:
            if lua_type(returned) == "table":
                source = "return"
                result = table_to_dict(returned, config.convert_arrays)
            else:
                source = "globals"
                result = table_to_dict(lua_globals, config.convert_arrays, skip=is_builtin_global)
        except RecursionError as exc:
            raise ConversionError(f"Table nesting is too deep or cyclic in {path}") from exc

    logger.debug("config.load_complete path=%s source=%s keys=%d", path, source, len(result))
    return result


def load_with_arrays(file_path: PathLike) -> LoadResult:
    return load(LoadConfig(file_path=file_path, convert_arrays=True))


def load_with_globals(file_path: PathLike, globals: Optional[Mapping[str, Any]]) -> LoadResult:
    return load(LoadConfig(file_path=file_path, globals=dict(globals or {})))


def load_with_arrays_and_globals(file_path: PathLike, globals: Optional[Mapping[str, Any]]) -> LoadResult:
    return load(LoadConfig(file_path=file_path, globals=dict(globals or {}), convert_arrays=True))
