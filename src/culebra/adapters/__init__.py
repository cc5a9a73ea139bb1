from culebra.adapters.cli import (
    add_config_argument,
    initialize_config,
    load_dotenv_if_present,
    parse_global_assignment,
)

__all__ = [
    "add_config_argument",
    "initialize_config",
    "load_dotenv_if_present",
    "parse_global_assignment",
]
