"""Logging setup for the wxstar-mqtt command line and embedding services."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"

PUBLISHER_LOGGER = "wxstar_mqtt.publisher"
NETWORK_LOGGERS = ("paho", "wxstar_mqtt.adapters.mqtt.paho")


def _resolve_level(name: Optional[str], default: int) -> int:
    if not name:
        return default
    level = logging.getLevelName(name.strip().upper())
    return level if isinstance(level, int) else default


def configure_logging(
    level: str = "INFO",
    *,
    log_path: Optional[Path] = None,
    log_network: bool = False,
    publish_level: Optional[str] = None,
) -> None:
    """Install console (and optionally file) handlers on the root logger.

    ``publish_level`` tunes the publisher on its own, e.g. ``DEBUG`` to see
    every topic and payload size of a burst while the rest stays at
    ``level``. Without ``log_network`` the paho client logs only warnings.
    """

    root_level = _resolve_level(level, logging.INFO)
    formatter = logging.Formatter(LOG_FORMAT)

    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)
    root.setLevel(root_level)

    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if log_path:
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_path, encoding="utf-8"))
    for handler in handlers:
        handler.setFormatter(formatter)
        root.addHandler(handler)

    publisher_level = _resolve_level(publish_level, logging.NOTSET)
    logging.getLogger(PUBLISHER_LOGGER).setLevel(publisher_level)

    network_level = logging.NOTSET if log_network else logging.WARNING
    for name in NETWORK_LOGGERS:
        logging.getLogger(name).setLevel(network_level)
