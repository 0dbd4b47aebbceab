"""Configuration loader for wxstar-mqtt."""

from __future__ import annotations

import socket
from configparser import ConfigParser
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from . import constants


def _default_client_id() -> str:
    return f"wxstar-{socket.gethostname()}"


@dataclass(slots=True)
class BrokerConfig:
    host: str = constants.DEFAULT_BROKER_HOST
    port: int = constants.DEFAULT_BROKER_PORT
    username: Optional[str] = None
    password: Optional[str] = None
    client_id: str = ""
    keepalive: int = constants.DEFAULT_KEEPALIVE_SECONDS
    connect_timeout_seconds: float = constants.DEFAULT_CONNECT_TIMEOUT_SECONDS


@dataclass(slots=True)
class PublishingConfig:
    qos: int = 0
    retain: bool = False
    burst_delay_ms: int = constants.DEFAULT_BURST_DELAY_MS

    @property
    def burst_delay_seconds(self) -> float:
        return self.burst_delay_ms / 1000.0


@dataclass(slots=True)
class LoggingConfig:
    level: str = "INFO"
    path: Optional[Path] = None
    log_network: bool = False
    publish_level: Optional[str] = None


@dataclass(slots=True)
class StarConfig:
    broker: BrokerConfig
    publishing: PublishingConfig
    logging: LoggingConfig
    raw: ConfigParser
    path: Path


def load_config(path: Optional[Path] = None) -> StarConfig:
    """Load configuration from disk, applying defaults where necessary."""

    config_path = path or constants.DEFAULT_CONFIG_PATH
    parser = ConfigParser()
    parser.read_dict(
        {
            "broker": {
                "host": constants.DEFAULT_BROKER_HOST,
                "port": str(constants.DEFAULT_BROKER_PORT),
                "client_id": _default_client_id(),
                "keepalive": str(constants.DEFAULT_KEEPALIVE_SECONDS),
                "connect_timeout_seconds": str(
                    constants.DEFAULT_CONNECT_TIMEOUT_SECONDS
                ),
            },
            "publishing": {
                "qos": "0",
                "retain": "false",
                "burst_delay_ms": str(constants.DEFAULT_BURST_DELAY_MS),
            },
            "logging": {
                "level": "INFO",
                "log_network": "false",
            },
        }
    )

    if config_path.exists():
        parser.read(config_path)

    host_value = parser.get("broker", "host")
    port_value = parser.getint(
        "broker", "port", fallback=constants.DEFAULT_BROKER_PORT
    )

    if ":" in host_value:
        host_part, port_part = host_value.rsplit(":", 1)
        try:
            parsed_port = int(port_part)
        except ValueError:
            pass
        else:
            host_value = host_part
            port_value = parsed_port
            parser.set("broker", "host", host_part)
            parser.set("broker", "port", str(parsed_port))

    broker = BrokerConfig(
        host=host_value,
        port=port_value,
        username=parser.get("broker", "username", fallback=None) or None,
        password=parser.get("broker", "password", fallback=None),
        client_id=parser.get("broker", "client_id", fallback="")
        or _default_client_id(),
        keepalive=max(
            1,
            parser.getint(
                "broker", "keepalive", fallback=constants.DEFAULT_KEEPALIVE_SECONDS
            ),
        ),
        connect_timeout_seconds=max(
            0.1,
            parser.getfloat(
                "broker",
                "connect_timeout_seconds",
                fallback=constants.DEFAULT_CONNECT_TIMEOUT_SECONDS,
            ),
        ),
    )

    publishing = PublishingConfig(
        qos=max(0, min(2, parser.getint("publishing", "qos", fallback=0))),
        retain=parser.getboolean("publishing", "retain", fallback=False),
        burst_delay_ms=max(
            0,
            parser.getint(
                "publishing",
                "burst_delay_ms",
                fallback=constants.DEFAULT_BURST_DELAY_MS,
            ),
        ),
    )

    log_path_value = parser.get("logging", "path", fallback="")
    logging_config = LoggingConfig(
        level=parser.get("logging", "level", fallback="INFO"),
        path=Path(log_path_value).expanduser() if log_path_value else None,
        log_network=parser.getboolean("logging", "log_network", fallback=False),
        publish_level=parser.get("logging", "publish_level", fallback="") or None,
    )

    return StarConfig(
        broker=broker,
        publishing=publishing,
        logging=logging_config,
        raw=parser,
        path=config_path,
    )


def save_config(config: StarConfig) -> None:
    """Persist the current configuration to disk."""

    config_path = config.path
    config_path.parent.mkdir(parents=True, exist_ok=True)
    with config_path.open("w", encoding="utf-8") as stream:
        config.raw.write(stream)
