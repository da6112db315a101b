"""
Logging configuration.

The library itself only calls `logging.getLogger(__name__)`. Host applications that want
our default formatting call `configure_logging()`, which applies the packaged YAML config
(`src/geoweight/config/logging.yaml`) with the level from settings (`GEOWEIGHT_LOG_LEVEL`).
"""

from __future__ import annotations

import copy
import logging.config

from geoweight.config.settings import get_logging_config, get_settings


def configure_logging(level: str | None = None) -> None:
    """Configure the Python logging system based on packaged YAML config + settings."""
    settings = get_settings()
    config = copy.deepcopy(get_logging_config())

    level = (level or settings.app.log_level).upper()
    config.setdefault("root", {})["level"] = level
    for logger_cfg in config.get("loggers", {}).values():
        if isinstance(logger_cfg, dict):
            logger_cfg["level"] = level
    for handler in config.get("handlers", {}).values():
        if isinstance(handler, dict) and "level" in handler:
            handler["level"] = level

    logging.config.dictConfig(config)
