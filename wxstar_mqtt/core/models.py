"""Domain models for WeatherStar topics and payload envelopes."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional, Tuple, Union

from .. import constants
from .errors import InvalidFamilyError


class DeviceFamily(str, Enum):
    INTELLISTAR = "intellistar"
    INTELLISTAR2 = "intellistar2"
    WEATHERSTAR_XL = "weatherstar_xl"

    @property
    def short_code(self) -> Optional[str]:
        """Topic segment for broadcast feeds, or None while unsupported."""
        return _SHORT_CODES.get(self)

    @property
    def is_supported(self) -> bool:
        return self.short_code is not None

    @classmethod
    def parse(cls, value: Union[str, "DeviceFamily"]) -> "DeviceFamily":
        """Resolve a member from its name, value or short code."""

        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            needle = value.strip().lower()
            for member in cls:
                if needle in (member.value, member.name.lower(), member.short_code):
                    return member
        raise InvalidFamilyError(value)


_SHORT_CODES = {
    DeviceFamily.INTELLISTAR: "i1",
    DeviceFamily.INTELLISTAR2: "i2",
    DeviceFamily.WEATHERSTAR_XL: None,
}


@dataclass(frozen=True, slots=True)
class Broadcast:
    """Address every unit listening on a family feed."""

    national: bool = False
    priority: bool = False


@dataclass(frozen=True, slots=True)
class Unicast:
    """Address a single unit by its identifier."""

    unit_id: str

    def __post_init__(self) -> None:
        if not self.unit_id:
            raise ValueError("unit_id cannot be empty")


AddressTarget = Union[Broadcast, Unicast]


@dataclass(frozen=True, slots=True)
class CueSpec:
    unit_id: str
    duration: int = constants.DEFAULT_CUE_DURATION_SECONDS
    flavor: str = constants.DEFAULT_CUE_FLAVOR


@dataclass(frozen=True, slots=True)
class DataCommand:
    command: str
    data: str


@dataclass(frozen=True, slots=True)
class GenericCommand:
    command: str


@dataclass(frozen=True, slots=True)
class CueLoad:
    cue_id: str
    cues: Tuple[CueSpec, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "cues", tuple(self.cues))


@dataclass(frozen=True, slots=True)
class CueRun:
    cue_id: str
    start_time: datetime


Envelope = Union[DataCommand, GenericCommand, CueLoad, CueRun]
