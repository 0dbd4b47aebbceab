"""Broker connection bundled with a ready-to-use publisher."""

from __future__ import annotations

import logging
from typing import Optional

from .adapters import MQTTClient
from .config import StarConfig
from .core import SleepFunc
from .publisher import StarPublisher

LOGGER = logging.getLogger(__name__)


class BrokerClient:
    """Owns the MQTT connection and the publisher that writes to it.

    Usage::

        async with BrokerClient(config) as client:
            client.publisher.publish_command(DeviceFamily.INTELLISTAR2, Broadcast(), "reboot")
    """

    def __init__(
        self,
        config: StarConfig,
        *,
        mqtt_client: Optional[MQTTClient] = None,
        sleep: Optional[SleepFunc] = None,
    ) -> None:
        self._config = config
        self._mqtt = mqtt_client or MQTTClient(config.broker)
        self._publisher = StarPublisher(
            self._mqtt,
            qos=config.publishing.qos,
            retain=config.publishing.retain,
            burst_delay=config.publishing.burst_delay_seconds,
            sleep=sleep,
        )

    @property
    def client_id(self) -> str:
        return self._mqtt.client_id

    @property
    def publisher(self) -> StarPublisher:
        return self._publisher

    async def connect(self, timeout: Optional[float] = None) -> None:
        await self._mqtt.connect(timeout=timeout)

    async def disconnect(self) -> None:
        await self._mqtt.disconnect()

    async def __aenter__(self) -> "BrokerClient":
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.disconnect()
