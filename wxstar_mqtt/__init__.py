"""Topic routing and payload publishing for WeatherStar units over MQTT."""

from .client import BrokerClient
from .core import (
    Broadcast,
    BuildSkipped,
    CueLoad,
    CueRun,
    CueSpec,
    DataCommand,
    DeviceFamily,
    EnvelopeError,
    GenericCommand,
    InvalidFamilyError,
    RoutingError,
    Unicast,
    UnsupportedFamilyError,
    build,
    cue_topic,
    route,
)
from .publisher import BurstItem, PublishResult, PublishStatus, StarPublisher

__all__ = [
    "Broadcast",
    "BrokerClient",
    "BuildSkipped",
    "BurstItem",
    "CueLoad",
    "CueRun",
    "CueSpec",
    "DataCommand",
    "DeviceFamily",
    "EnvelopeError",
    "GenericCommand",
    "InvalidFamilyError",
    "PublishResult",
    "PublishStatus",
    "RoutingError",
    "StarPublisher",
    "Unicast",
    "UnsupportedFamilyError",
    "build",
    "cue_topic",
    "route",
]
