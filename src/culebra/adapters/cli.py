from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Any, Mapping, Optional, Tuple

from dotenv import load_dotenv

from culebra.config.models import LoadConfig
from culebra.errors import CulebraError
from culebra.registry.binding import bind_to_registry
from culebra.registry.settings import Settings, parse_scalar

logger = logging.getLogger(__name__)

CONFIG_EXTENSION = ".lua"


def add_config_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--config",
        default=None,
        help="Path to a Lua config file (default: search by config name)",
    )


def parse_global_assignment(text: str) -> Tuple[str, Any]:
    name, sep, raw = text.partition("=")
    name = name.strip()
    if not sep or not name:
        raise argparse.ArgumentTypeError(f"Expected NAME=VALUE, got: {text}")
    return name, parse_scalar(raw)


def load_dotenv_if_present(dotenv_path: Path) -> bool:
    if not dotenv_path.exists():
        return False
    load_dotenv(dotenv_path=dotenv_path, override=False)
    logger.debug("config.dotenv_loaded path=%s", dotenv_path)
    return True


def initialize_config(
    args: argparse.Namespace,
    settings: Settings,
    *,
    globals: Optional[Mapping[str, Any]] = None,
    convert_arrays: bool = True,
) -> bool:
    """
    Bind the Lua config selected on the command line into `settings`.

    An explicit `--config` that fails to load is reported on stderr. Without
    `--config` the file is searched by `settings.config_name`; failures there are
    only logged. Returns True when a file was bound.
    """
    explicit = getattr(args, "config", None)
    if explicit:
        request = LoadConfig(file_path=explicit, globals=dict(globals or {}), convert_arrays=convert_arrays)
        try:
            bind_to_registry(request, settings)
        except CulebraError as exc:
            print(f"Error loading config file: {exc}", file=sys.stderr)
            return False
        settings.config_file_used = Path(explicit)
        return True

    discovered = settings.find_config_file(CONFIG_EXTENSION)
    if discovered is None:
        return False

    request = LoadConfig(file_path=discovered, globals=dict(globals or {}), convert_arrays=convert_arrays)
    try:
        bind_to_registry(request, settings)
    except CulebraError as exc:
        logger.warning("config.autoload_failed path=%s error=%s", discovered, exc)
        return False
    settings.config_file_used = discovered
    logger.info("config.autoloaded path=%s", discovered)
    return True
