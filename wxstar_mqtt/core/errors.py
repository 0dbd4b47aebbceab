"""Exceptions raised while routing and building WeatherStar messages."""

from __future__ import annotations


class RoutingError(ValueError):
    """Raised when a destination topic cannot be computed."""


class UnsupportedFamilyError(RoutingError):
    """The device family is known but has no MQTT feed yet."""

    def __init__(self, family: object) -> None:
        super().__init__(f"Publishing is not implemented for device family {family}")
        self.family = family


class InvalidFamilyError(RoutingError):
    """The value is not one of the generic device families."""

    def __init__(self, family: object) -> None:
        super().__init__(
            f"MQTT publishing only permits generic unit families, got {family!r}"
        )
        self.family = family


class EnvelopeError(ValueError):
    """Raised when an envelope cannot be serialized."""
