"""Serialization of WeatherStar payload envelopes.

Field names and their order are the wire contract shared with existing
receivers; default-valued fields are always emitted.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Union

from .. import constants
from .errors import EnvelopeError
from .models import CueLoad, CueRun, CueSpec, DataCommand, Envelope, GenericCommand


@dataclass(frozen=True, slots=True)
class BuildSkipped:
    """Nothing to send; callers treat this as a successful no-op."""

    reason: str


def format_start_time(value: datetime) -> str:
    return value.strftime(constants.START_TIME_FORMAT)


def _cue_to_dict(cue: CueSpec) -> Dict[str, Any]:
    return {"star": cue.unit_id, "duration": cue.duration, "flavor": cue.flavor}


def _require_cue_id(cue_id: str) -> None:
    if not cue_id:
        raise EnvelopeError("cue_id cannot be empty")


def envelope_to_dict(envelope: Envelope) -> Dict[str, Any]:
    """Map an envelope onto its wire object, preserving field order."""

    if isinstance(envelope, DataCommand):
        return {"data": envelope.data, "cmd": envelope.command}
    if isinstance(envelope, GenericCommand):
        return {"cmd": envelope.command}
    if isinstance(envelope, CueLoad):
        _require_cue_id(envelope.cue_id)
        return {
            "cue_id": envelope.cue_id,
            "cues": [_cue_to_dict(cue) for cue in envelope.cues],
        }
    if isinstance(envelope, CueRun):
        _require_cue_id(envelope.cue_id)
        return {
            "cue_id": envelope.cue_id,
            "start_time": format_start_time(envelope.start_time),
        }
    raise EnvelopeError(f"Unknown envelope type: {type(envelope).__name__}")


def build(envelope: Envelope) -> Union[bytes, BuildSkipped]:
    """Serialize an envelope to the UTF-8 JSON payload sent to receivers."""

    if isinstance(envelope, CueLoad) and not envelope.cues:
        return BuildSkipped(reason=f"cue load {envelope.cue_id!r} has no cues")

    payload = envelope_to_dict(envelope)
    return json.dumps(payload, separators=(",", ":")).encode("utf-8")
