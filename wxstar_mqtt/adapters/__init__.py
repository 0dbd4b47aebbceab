"""Adapter modules for external integrations."""

from .mqtt import MQTTClient, MQTTConnectionError

__all__ = [
    "MQTTClient",
    "MQTTConnectionError",
]
