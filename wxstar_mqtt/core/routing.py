"""Topic routing for WeatherStar data, command and cue messages.

Every publish operation resolves its destination here so the topic
scheme lives in one place:

- unicast: ``wxstar/data/<unit id>`` for both data and commands
- broadcast: ``wxstar/data[/national]/<short code>[/priority]``
- cues: ``wxstar/cues`` or, when asked for explicitly, ``wxstar/cues/<short code>``
"""

from __future__ import annotations

from typing import Optional

from .. import constants
from .errors import InvalidFamilyError, UnsupportedFamilyError
from .models import AddressTarget, Broadcast, DeviceFamily, Unicast


def short_code_for(family: DeviceFamily) -> str:
    """Return the topic segment for ``family`` or raise a routing error."""

    if not isinstance(family, DeviceFamily):
        raise InvalidFamilyError(family)
    code = family.short_code
    if code is None:
        raise UnsupportedFamilyError(family)
    return code


def route(family: DeviceFamily, target: AddressTarget) -> str:
    """Compute the data/command topic for a family and address target."""

    if isinstance(target, Unicast):
        # Unicast wins over family and broadcast flags.
        return f"{constants.DATA_TOPIC}/{target.unit_id}"

    if not isinstance(target, Broadcast):
        raise TypeError(f"Unsupported address target: {target!r}")

    code = short_code_for(family)
    national = "/national/" if target.national else "/"
    priority = "/priority" if target.priority else ""
    return f"{constants.DATA_TOPIC}{national}{code}{priority}"


def cue_topic(
    family: Optional[DeviceFamily] = None, *, per_family: bool = False
) -> str:
    """Compute the topic used for cue load/run messages.

    The shared ``wxstar/cues`` topic is used unless ``per_family`` is set,
    in which case ``family`` is required and must be supported.
    """

    if not per_family:
        return constants.CUES_TOPIC
    if family is None:
        raise InvalidFamilyError(family)
    return f"{constants.CUES_TOPIC}/{short_code_for(family)}"
