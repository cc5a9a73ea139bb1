from __future__ import annotations

import copy
import logging
import math
import os
from pathlib import Path
from typing import Any, Mapping, MutableMapping, Optional, Sequence, Type, TypeVar

import yaml
from pydantic import BaseModel

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)

KEY_DELIMITER = "."


def parse_scalar(text: str) -> Any:
    """Interpret a command line or environment string as a YAML scalar (`8080` -> 8080)."""
    if not text.strip():
        return text
    try:
        value = yaml.safe_load(text)
    except yaml.YAMLError:
        return text
    # Dates, lists and mappings stay as the raw text.
    if value is None or isinstance(value, (bool, int, float, str)):
        return value
    return text


def _deep_merge_dicts(base: MutableMapping[str, Any], override: Mapping[str, Any]) -> None:
    for k, v in override.items():
        if isinstance(v, Mapping) and isinstance(base.get(k), Mapping):
            _deep_merge_dicts(base[k], v)  # type: ignore[index]
            continue
        base[k] = copy.deepcopy(v)


def _split_key(key: str) -> Sequence[str]:
    parts = [p for p in key.split(KEY_DELIMITER) if p]
    if not parts:
        raise ValueError(f"Invalid configuration key: {key!r}")
    return parts


def _env_var_name_to_segments(env_var_name: str, prefix: str) -> Sequence[str]:
    remainder = env_var_name[len(prefix) :]
    parts = [p for p in remainder.split("__") if p]
    if not parts:
        raise ValueError(f"Invalid environment variable override name: {env_var_name}")
    return [p.lower() for p in parts]


def _format_number(value: float) -> str:
    if value.is_integer():
        return str(int(value))
    return repr(value)


def _to_string(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        return _format_number(value)
    return str(value)


def _to_int(value: Any, default: int) -> int:
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        # inf and nan have no integer value.
        return int(value) if math.isfinite(value) else default
    if isinstance(value, str):
        try:
            return int(float(value.strip()))
        except (ValueError, OverflowError):
            return default
    return default


class Settings:
    """
    In-process hierarchical settings registry.

    Keys use dotted notation: after `set("database", {"host": "db"})`,
    `get("database.host")` returns "db". Lua config files are discovered by name
    across the registered search paths.
    """

    def __init__(self) -> None:
        self._data: dict[str, Any] = {}
        self._config_name: Optional[str] = None
        self._config_paths: list[str] = []
        self.config_file_used: Optional[Path] = None

    # -- Values ---------------------------------------------------------

    def set(self, key: str, value: Any) -> None:
        segments = _split_key(key)
        parent: MutableMapping[str, Any] = self._data
        for segment in segments[:-1]:
            child = parent.get(segment)
            if not isinstance(child, dict):
                child = {}
                parent[segment] = child
            parent = child
        parent[segments[-1]] = copy.deepcopy(value)

    def merge(self, values: Mapping[str, Any]) -> None:
        _deep_merge_dicts(self._data, values)

    def get(self, key: str, default: Any = None) -> Any:
        cur: Any = self._data
        for segment in _split_key(key):
            if not isinstance(cur, Mapping) or segment not in cur:
                return default
            cur = cur[segment]
        return cur

    def is_set(self, key: str) -> bool:
        sentinel = object()
        return self.get(key, sentinel) is not sentinel

    def all_settings(self) -> dict[str, Any]:
        return copy.deepcopy(self._data)

    def get_string(self, key: str, default: str = "") -> str:
        if not self.is_set(key):
            return default
        return _to_string(self.get(key))

    def get_int(self, key: str, default: int = 0) -> int:
        return _to_int(self.get(key), default)

    def get_float(self, key: str, default: float = 0.0) -> float:
        value = self.get(key)
        if isinstance(value, (int, float)):
            return float(value)
        if isinstance(value, str):
            try:
                return float(value)
            except ValueError:
                return default
        return default

    def get_bool(self, key: str, default: bool = False) -> bool:
        value = self.get(key)
        if isinstance(value, bool):
            return value
        if isinstance(value, (int, float)):
            return value != 0
        if isinstance(value, str):
            return value.strip().lower() in ("1", "true", "yes", "on")
        return default

    def get_string_list(self, key: str) -> list[str]:
        value = self.get(key)
        if isinstance(value, (list, tuple)):
            return [_to_string(item) for item in value]
        if isinstance(value, str):
            return value.split()
        return []

    def get_int_list(self, key: str) -> list[int]:
        value = self.get(key)
        if not isinstance(value, (list, tuple)):
            return []
        return [_to_int(item, 0) for item in value]

    def unmarshal(self, model_type: Type[T]) -> T:
        """Validate the current settings into a pydantic model."""
        return model_type.model_validate(self.all_settings())

    # -- Environment ----------------------------------------------------

    def apply_env_overrides(self, env_prefix: str) -> int:
        """
        Set `a.b` from every `<prefix>A__B` environment variable.

        Returns the number of overrides applied.
        """
        applied = 0
        for name, value in os.environ.items():
            if not name.startswith(env_prefix):
                continue
            segments = _env_var_name_to_segments(name, env_prefix)
            dotted = KEY_DELIMITER.join(segments)
            self.set(dotted, parse_scalar(value))
            logger.debug("settings.env_override key=%s", dotted)
            applied += 1
        return applied

    # -- Config file discovery ------------------------------------------

    def set_config_name(self, name: str) -> None:
        self._config_name = name

    @property
    def config_name(self) -> Optional[str]:
        return self._config_name

    def add_config_path(self, path: str) -> None:
        self._config_paths.append(path)

    @property
    def config_paths(self) -> Sequence[str]:
        return tuple(self._config_paths)

    def find_config_file(self, extension: str) -> Optional[Path]:
        """
        Return the first `<config name><extension>` found in the search paths.

        Without registered paths the working directory is searched.
        """
        if not self._config_name:
            return None
        search_paths = self._config_paths or ["."]
        filename = f"{self._config_name}{extension}"
        for raw in search_paths:
            directory = Path(os.path.expanduser(os.path.expandvars(raw)))
            candidate = directory / filename
            if candidate.is_file():
                return candidate
        logger.debug("settings.config_file_not_found name=%s paths=%s", filename, search_paths)
        return None
