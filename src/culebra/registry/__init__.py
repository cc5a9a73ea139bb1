"""Settings registry and helpers that bind loaded Lua configs into it."""

from culebra.registry.binding import auto_bind_to_registry, bind_to_registry, bind_to_registry_with_arrays
from culebra.registry.interfaces import Registry
from culebra.registry.settings import Settings, parse_scalar

__all__ = [
    "Registry",
    "Settings",
    "auto_bind_to_registry",
    "bind_to_registry",
    "bind_to_registry_with_arrays",
    "parse_scalar",
]
