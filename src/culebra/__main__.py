from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Optional, Sequence

import yaml

from culebra.adapters.cli import (
    add_config_argument,
    initialize_config,
    load_dotenv_if_present,
    parse_global_assignment,
)
from culebra.config.models import LoggingSettings
from culebra.logging import init_logging
from culebra.registry.settings import Settings

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="culebra", description="Load Lua configuration files")
    add_config_argument(parser)
    parser.add_argument(
        "--config-name",
        default=None,
        help="File name (without .lua) to search for when --config is not given",
    )
    parser.add_argument(
        "--config-path",
        action="append",
        default=[],
        help="Directory searched for the config file; repeatable (default: .)",
    )
    parser.add_argument(
        "--global",
        dest="globals",
        action="append",
        default=[],
        type=parse_global_assignment,
        metavar="NAME=VALUE",
        help="Lua global set before the config runs; repeatable",
    )
    parser.add_argument(
        "--no-arrays",
        action="store_true",
        help="Keep array tables as mappings keyed by index",
    )
    parser.add_argument(
        "--env-prefix",
        default=None,
        help="Apply overrides from environment variables, e.g. PREFIX_DATABASE__HOST sets database.host",
    )
    parser.add_argument(
        "--dotenv",
        default=".env",
        help="Path to a .env file read before the config runs (default: .env)",
    )
    parser.add_argument(
        "--no-dotenv",
        action="store_true",
        help="Disable loading .env",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=("DEBUG", "INFO", "WARNING", "ERROR"),
        help="Log level (default: WARNING)",
    )

    subparsers = parser.add_subparsers(dest="command", required=True, help="Command to run")

    # Command: dump
    dump_parser = subparsers.add_parser("dump", help="Print every loaded setting")
    dump_parser.add_argument("--format", choices=("json", "yaml"), default="json")

    # Command: get
    get_parser = subparsers.add_parser("get", help="Print a single setting")
    get_parser.add_argument("key", help="Dotted key, e.g. database.host")

    return parser


def _build_settings(args: argparse.Namespace) -> tuple[Settings, bool]:
    settings = Settings()
    if args.config_name:
        settings.set_config_name(args.config_name)
    for path in args.config_path:
        settings.add_config_path(path)

    loaded = initialize_config(
        args,
        settings,
        globals=dict(args.globals),
        convert_arrays=not args.no_arrays,
    )
    if args.env_prefix:
        settings.apply_env_overrides(args.env_prefix)
    return settings, loaded


def _render(value: Any, fmt: str) -> str:
    if fmt == "yaml":
        return yaml.safe_dump(value, sort_keys=True, allow_unicode=True)
    return json.dumps(value, indent=2, sort_keys=True, ensure_ascii=False) + "\n"


def _run(args: argparse.Namespace) -> int:
    init_logging(LoggingSettings(level=args.log_level))
    if not args.no_dotenv:
        load_dotenv_if_present(Path(args.dotenv))

    settings, loaded = _build_settings(args)
    if not loaded and not settings.all_settings():
        print("No configuration loaded.", file=sys.stderr)
        return 1
    logger.info("app.settings_ready source=%s", settings.config_file_used)

    if args.command == "dump":
        sys.stdout.write(_render(settings.all_settings(), args.format))
        return 0

    if args.command == "get":
        if not settings.is_set(args.key):
            print(f"Key not set: {args.key}", file=sys.stderr)
            return 1
        value = settings.get(args.key)
        if isinstance(value, (dict, list)):
            sys.stdout.write(_render(value, "json"))
        else:
            print(settings.get_string(args.key))
        return 0

    return 2


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    try:
        return _run(args)
    except KeyboardInterrupt:
        logger.info("app.interrupted_by_user")
        return 130


if __name__ == "__main__":
    raise SystemExit(main())
