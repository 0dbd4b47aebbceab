"""Protocol definitions for the publish transport."""

from __future__ import annotations

from typing import Awaitable, Callable, Protocol

SleepFunc = Callable[[float], Awaitable[None]]


class Transport(Protocol):
    """Minimal contract for anything that can deliver an MQTT message."""

    def publish(
        self, topic: str, payload: bytes, qos: int = 0, retain: bool = False
    ) -> None:
        """Hand the message to the broker connection.

        Raises whatever the underlying client reports on failure.
        """
        ...
