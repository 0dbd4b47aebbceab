"""Publishing of WeatherStar data, commands and presentation cues.

``StarPublisher`` pairs a topic from :mod:`wxstar_mqtt.core.routing` with a
payload from :mod:`wxstar_mqtt.core.envelopes` and hands both to the
transport. Single-shot operations raise routing, build and transport
errors; bursts record them per item and keep going.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Iterable, List, Optional, Sequence

from . import constants
from .core import (
    AddressTarget,
    Broadcast,
    BuildSkipped,
    CueLoad,
    CueRun,
    CueSpec,
    DataCommand,
    DeviceFamily,
    Envelope,
    GenericCommand,
    SleepFunc,
    Transport,
    build,
    cue_topic,
    route,
)

LOGGER = logging.getLogger(__name__)


class PublishStatus(str, Enum):
    PUBLISHED = "published"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass(frozen=True, slots=True)
class PublishResult:
    """Outcome of a single publish attempt."""

    topic: Optional[str]
    status: PublishStatus
    error: Optional[BaseException] = None
    detail: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status is not PublishStatus.FAILED


@dataclass(frozen=True, slots=True)
class BurstItem:
    """One entry of a burst: an envelope plus how to pick its topic.

    Data and command envelopes are routed with ``family`` and ``target``.
    Cue envelopes go to the shared cue topic unless ``per_family_cues``
    is set.
    """

    envelope: Envelope
    family: Optional[DeviceFamily] = None
    target: AddressTarget = Broadcast()
    per_family_cues: bool = False


def resolve_topic(item: BurstItem) -> str:
    envelope = item.envelope
    if isinstance(envelope, (CueLoad, CueRun)):
        return cue_topic(item.family, per_family=item.per_family_cues)
    return route(item.family, item.target)  # type: ignore[arg-type]


class StarPublisher:
    """Routes and serializes WeatherStar messages onto a transport."""

    def __init__(
        self,
        transport: Transport,
        *,
        qos: int = 0,
        retain: bool = False,
        burst_delay: float = constants.DEFAULT_BURST_DELAY_MS / 1000.0,
        sleep: Optional[SleepFunc] = None,
    ) -> None:
        self._transport = transport
        self._qos = qos
        self._retain = retain
        self._burst_delay = max(0.0, burst_delay)
        self._sleep: SleepFunc = sleep or asyncio.sleep

    @property
    def burst_delay(self) -> float:
        return self._burst_delay

    def publish(self, item: BurstItem) -> PublishResult:
        """Route, build and send a single item."""

        topic = resolve_topic(item)
        payload = build(item.envelope)
        if isinstance(payload, BuildSkipped):
            LOGGER.debug("Skipping publish to %s: %s", topic, payload.reason)
            return PublishResult(
                topic=topic, status=PublishStatus.SKIPPED, detail=payload.reason
            )
        self._send(topic, payload)
        return PublishResult(topic=topic, status=PublishStatus.PUBLISHED)

    def publish_data(
        self,
        family: DeviceFamily,
        target: AddressTarget,
        command: str,
        data: str,
    ) -> PublishResult:
        return self.publish(
            BurstItem(DataCommand(command=command, data=data), family, target)
        )

    def publish_command(
        self, family: DeviceFamily, target: AddressTarget, command: str
    ) -> PublishResult:
        return self.publish(BurstItem(GenericCommand(command=command), family, target))

    def publish_cue_load(
        self,
        cues: Sequence[CueSpec],
        cue_id: str,
        family: Optional[DeviceFamily] = None,
    ) -> PublishResult:
        """Load a presentation; a family selects the per-family cue topic."""

        return self.publish(
            BurstItem(
                CueLoad(cue_id=cue_id, cues=cues),
                family=family,
                per_family_cues=family is not None,
            )
        )

    def publish_cue_run(
        self,
        cue_id: str,
        start_time: datetime,
        family: Optional[DeviceFamily] = None,
    ) -> PublishResult:
        return self.publish(
            BurstItem(
                CueRun(cue_id=cue_id, start_time=start_time),
                family=family,
                per_family_cues=family is not None,
            )
        )

    async def publish_burst(
        self, items: Iterable[BurstItem], delay: Optional[float] = None
    ) -> List[PublishResult]:
        """Publish items in order, pausing ``delay`` seconds between sends.

        A failing item is recorded and the rest of the burst still goes out.
        """

        pause = self._burst_delay if delay is None else max(0.0, delay)
        results: List[PublishResult] = []
        sent_before = False

        for index, item in enumerate(items):
            topic: Optional[str] = None
            try:
                topic = resolve_topic(item)
                payload = build(item.envelope)
                if isinstance(payload, BuildSkipped):
                    results.append(
                        PublishResult(
                            topic=topic,
                            status=PublishStatus.SKIPPED,
                            detail=payload.reason,
                        )
                    )
                    continue
                if sent_before and pause > 0:
                    await self._sleep(pause)
                sent_before = True
                self._send(topic, payload)
            except asyncio.CancelledError:
                raise
            except Exception as exc:
                LOGGER.warning(
                    "Burst item %d to %s failed: %s", index, topic or "<unrouted>", exc
                )
                results.append(
                    PublishResult(topic=topic, status=PublishStatus.FAILED, error=exc)
                )
                continue
            results.append(PublishResult(topic=topic, status=PublishStatus.PUBLISHED))

        if results:
            failed = sum(1 for result in results if not result.ok)
            LOGGER.info(
                "Burst finished: %d item(s), %d failed", len(results), failed
            )
        return results

    async def publish_data_burst(
        self,
        family: DeviceFamily,
        items: Sequence[DataCommand],
        target: AddressTarget = Broadcast(),
        delay: Optional[float] = None,
    ) -> List[PublishResult]:
        return await self.publish_burst(
            (BurstItem(item, family, target) for item in items), delay=delay
        )

    async def publish_command_burst(
        self,
        family: DeviceFamily,
        commands: Sequence[str],
        target: AddressTarget = Broadcast(),
        delay: Optional[float] = None,
    ) -> List[PublishResult]:
        return await self.publish_burst(
            (BurstItem(GenericCommand(command), family, target) for command in commands),
            delay=delay,
        )

    def _send(self, topic: str, payload: bytes) -> None:
        LOGGER.debug("Publishing %d bytes to %s", len(payload), topic)
        self._transport.publish(topic, payload, qos=self._qos, retain=self._retain)
