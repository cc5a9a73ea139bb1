from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from pydantic import BaseModel

from culebra import LoadConfig, Settings, auto_bind_to_registry, load, load_with_arrays
from culebra.config.models import LoggingSettings
from culebra.logging import init_logging

HERE = Path(__file__).parent


class Service(BaseModel):
    name: str
    port: int
    endpoints: list[str] = []
    queues: list[str] = []


class PoolConfig(BaseModel):
    min_size: int
    max_size: int
    timeouts: list[int]


class Database(BaseModel):
    primary: str
    replicas: list[str]
    connection_pool: PoolConfig


class AppInfo(BaseModel):
    name: str
    version: str
    environment: Optional[str] = None


class AppConfig(BaseModel):
    app: AppInfo
    database: Database
    services: list[Service]


def main() -> None:
    init_logging(LoggingSettings(level="INFO"))
    logger = logging.getLogger("arrays_demo")

    traditional = load(LoadConfig(file_path=HERE / "config-traditional.lua"))
    logger.info("Database hosts without array conversion: %s", traditional["database_hosts"])

    converted = load_with_arrays(HERE / "config-neovim-style.lua")
    logger.info("Database replicas with array conversion: %s", converted["database"]["replicas"])

    settings = Settings()
    auto_bind_to_registry(LoadConfig(file_path=HERE / "config-neovim-style.lua"), settings)
    logger.info("Timeouts via settings: %s", settings.get_int_list("database.connection_pool.timeouts"))

    config = settings.unmarshal(AppConfig)
    for service in config.services:
        logger.info("Service %s on port %d", service.name, service.port)


if __name__ == "__main__":
    main()
