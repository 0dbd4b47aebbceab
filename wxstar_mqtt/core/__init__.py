"""Core routing and envelope primitives for wxstar-mqtt."""

from .envelopes import BuildSkipped, build, envelope_to_dict, format_start_time
from .errors import (
    EnvelopeError,
    InvalidFamilyError,
    RoutingError,
    UnsupportedFamilyError,
)
from .models import (
    AddressTarget,
    Broadcast,
    CueLoad,
    CueRun,
    CueSpec,
    DataCommand,
    DeviceFamily,
    Envelope,
    GenericCommand,
    Unicast,
)
from .protocols import SleepFunc, Transport
from .routing import cue_topic, route, short_code_for

__all__ = [
    "AddressTarget",
    "Broadcast",
    "BuildSkipped",
    "CueLoad",
    "CueRun",
    "CueSpec",
    "DataCommand",
    "DeviceFamily",
    "Envelope",
    "EnvelopeError",
    "GenericCommand",
    "InvalidFamilyError",
    "RoutingError",
    "SleepFunc",
    "Transport",
    "Unicast",
    "UnsupportedFamilyError",
    "build",
    "cue_topic",
    "envelope_to_dict",
    "format_start_time",
    "route",
    "short_code_for",
]
