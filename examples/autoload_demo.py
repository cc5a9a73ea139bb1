from __future__ import annotations

import argparse
from pathlib import Path

from culebra import Settings
from culebra.adapters import add_config_argument, initialize_config


def main() -> None:
    parser = argparse.ArgumentParser(prog="autoload-example")
    add_config_argument(parser)
    args = parser.parse_args()

    settings = Settings()
    settings.set_config_name("example")
    settings.add_config_path("/etc")
    settings.add_config_path("$HOME/.config")
    settings.add_config_path(str(Path(__file__).parent))
    initialize_config(args, settings)

    print(f"App Name: {settings.get_string('app.name')}")
    print(f"App Version: {settings.get_string('app.version')}")
    print(f"Database Host: {settings.get_string('database.host')}")
    print(f"Database Port: {settings.get_int('database.port')}")
    print(f"Debug Mode: {settings.get_bool('debug')}")
    print(f"Environment: {settings.get_string('environment')}")


if __name__ == "__main__":
    main()
