from __future__ import annotations

import logging

from culebra.config.loader import PathLike, load
from culebra.config.models import LoadConfig
from culebra.registry.interfaces import Registry

logger = logging.getLogger(__name__)


def bind_to_registry(config: LoadConfig, registry: Registry) -> None:
    """Load `config` and set each top-level entry on `registry`. Nothing is set on failure."""
    data = load(config)
    for key, value in data.items():
        registry.set(key, value)
    logger.info("config.bound path=%s keys=%d", config.file_path, len(data))


def bind_to_registry_with_arrays(file_path: PathLike, registry: Registry) -> None:
    bind_to_registry(LoadConfig(file_path=file_path, convert_arrays=True), registry)


def auto_bind_to_registry(config: LoadConfig, registry: Registry) -> None:
    """Like `bind_to_registry`, but array tables always arrive as lists."""
    bind_to_registry(config.model_copy(update={"convert_arrays": True}), registry)
