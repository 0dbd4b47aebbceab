"""Tests for the StarPublisher operations and burst sequencing."""

import json
from datetime import datetime

import pytest

from wxstar_mqtt.adapters import MQTTConnectionError
from wxstar_mqtt.core import (
    Broadcast,
    CueLoad,
    CueRun,
    CueSpec,
    DataCommand,
    DeviceFamily,
    GenericCommand,
    Unicast,
    UnsupportedFamilyError,
)
from wxstar_mqtt.publisher import BurstItem, PublishStatus, StarPublisher


class FakeTransport:
    """Records publishes against a shared fake clock."""

    def __init__(self, clock=None, fail_topics=()):
        self.clock = clock
        self.fail_topics = set(fail_topics)
        self.published = []

    def publish(self, topic, payload, qos=0, retain=False):
        if topic in self.fail_topics:
            raise MQTTConnectionError(f"Publish to {topic} failed with rc=4")
        now = self.clock.now if self.clock else None
        self.published.append((topic, payload, qos, retain, now))


class FakeClock:
    def __init__(self):
        self.now = 0.0
        self.sleeps = []

    async def sleep(self, seconds):
        self.sleeps.append(seconds)
        self.now += seconds


def test_publish_data_routes_and_serializes():
    transport = FakeTransport()
    publisher = StarPublisher(transport, qos=1, retain=False)

    result = publisher.publish_data(
        DeviceFamily.INTELLISTAR2,
        Broadcast(national=True, priority=True),
        "loadData(File={0})",
        "payload",
    )

    assert result.status is PublishStatus.PUBLISHED
    assert result.topic == "wxstar/data/national/i2/priority"
    topic, payload, qos, retain, _ = transport.published[0]
    assert topic == "wxstar/data/national/i2/priority"
    assert json.loads(payload) == {"data": "payload", "cmd": "loadData(File={0})"}
    assert (qos, retain) == (1, False)


def test_publish_command_to_unit():
    transport = FakeTransport()
    publisher = StarPublisher(transport)

    result = publisher.publish_command(
        DeviceFamily.INTELLISTAR, Unicast("abc-123"), "restart"
    )

    assert result.topic == "wxstar/data/abc-123"
    assert transport.published[0][1] == b'{"cmd":"restart"}'


def test_publish_unsupported_family_raises_before_transport():
    transport = FakeTransport()
    publisher = StarPublisher(transport)

    with pytest.raises(UnsupportedFamilyError):
        publisher.publish_command(DeviceFamily.WEATHERSTAR_XL, Broadcast(), "restart")

    assert transport.published == []


def test_publish_cue_load_shared_and_per_family_topics():
    transport = FakeTransport()
    publisher = StarPublisher(transport)
    cues = [CueSpec("unit-a"), CueSpec("unit-b")]

    shared = publisher.publish_cue_load(cues, "pres-1")
    per_family = publisher.publish_cue_load(cues, "pres-1", DeviceFamily.INTELLISTAR2)

    assert shared.topic == "wxstar/cues"
    assert per_family.topic == "wxstar/cues/i2"
    decoded = json.loads(transport.published[0][1])
    assert [cue["star"] for cue in decoded["cues"]] == ["unit-a", "unit-b"]


def test_publish_empty_cue_load_is_skipped_without_transport_call():
    transport = FakeTransport()
    publisher = StarPublisher(transport)

    result = publisher.publish_cue_load([], "pres-1")

    assert result.status is PublishStatus.SKIPPED
    assert result.ok is True
    assert transport.published == []


def test_publish_cue_run_formats_start_time():
    transport = FakeTransport()
    publisher = StarPublisher(transport)

    publisher.publish_cue_run("p1", datetime(2024, 1, 2, 3, 4, 5))

    topic, payload, *_ = transport.published[0]
    assert topic == "wxstar/cues"
    assert json.loads(payload)["start_time"] == "01/02/2024 03:04:05:00"


def test_transport_errors_pass_through_unmodified():
    transport = FakeTransport(fail_topics={"wxstar/data/i1"})
    publisher = StarPublisher(transport)

    with pytest.raises(MQTTConnectionError, match="rc=4"):
        publisher.publish_command(DeviceFamily.INTELLISTAR, Broadcast(), "restart")


@pytest.mark.asyncio
async def test_empty_burst_makes_no_calls():
    clock = FakeClock()
    transport = FakeTransport(clock)
    publisher = StarPublisher(transport, sleep=clock.sleep)

    results = await publisher.publish_burst([])

    assert results == []
    assert transport.published == []
    assert clock.sleeps == []


@pytest.mark.asyncio
async def test_burst_preserves_order_and_spacing():
    clock = FakeClock()
    transport = FakeTransport(clock)
    publisher = StarPublisher(transport, sleep=clock.sleep)
    items = [
        BurstItem(GenericCommand("a"), DeviceFamily.INTELLISTAR),
        BurstItem(GenericCommand("b"), DeviceFamily.INTELLISTAR2),
        BurstItem(CueRun("p1", datetime(2024, 1, 2, 3, 4, 5))),
    ]

    results = await publisher.publish_burst(items)

    assert [result.status for result in results] == [PublishStatus.PUBLISHED] * 3
    assert [entry[0] for entry in transport.published] == [
        "wxstar/data/i1",
        "wxstar/data/i2",
        "wxstar/cues",
    ]
    times = [entry[4] for entry in transport.published]
    assert all(later - earlier >= 0.5 for earlier, later in zip(times, times[1:]))
    assert clock.sleeps == [0.5, 0.5]


@pytest.mark.asyncio
async def test_burst_delay_override():
    clock = FakeClock()
    transport = FakeTransport(clock)
    publisher = StarPublisher(transport, burst_delay=2.0, sleep=clock.sleep)
    items = [BurstItem(GenericCommand(str(i)), DeviceFamily.INTELLISTAR) for i in range(3)]

    await publisher.publish_burst(items, delay=0)

    assert clock.sleeps == []
    assert len(transport.published) == 3


@pytest.mark.asyncio
async def test_burst_isolates_failures():
    clock = FakeClock()
    transport = FakeTransport(clock, fail_topics={"wxstar/data/i2"})
    publisher = StarPublisher(transport, sleep=clock.sleep)
    items = [
        BurstItem(GenericCommand("a"), DeviceFamily.INTELLISTAR),
        BurstItem(GenericCommand("b"), DeviceFamily.WEATHERSTAR_XL),
        BurstItem(GenericCommand("c"), DeviceFamily.INTELLISTAR2),
        BurstItem(CueLoad("empty", [])),
        BurstItem(GenericCommand("d"), target=Unicast("unit-9")),
    ]

    results = await publisher.publish_burst(items)

    assert [result.status for result in results] == [
        PublishStatus.PUBLISHED,
        PublishStatus.FAILED,
        PublishStatus.FAILED,
        PublishStatus.SKIPPED,
        PublishStatus.PUBLISHED,
    ]
    assert isinstance(results[1].error, UnsupportedFamilyError)
    assert results[1].topic is None
    assert isinstance(results[2].error, MQTTConnectionError)
    assert results[2].topic == "wxstar/data/i2"
    assert [entry[0] for entry in transport.published] == [
        "wxstar/data/i1",
        "wxstar/data/unit-9",
    ]


@pytest.mark.asyncio
async def test_data_burst_uses_shared_destination():
    clock = FakeClock()
    transport = FakeTransport(clock)
    publisher = StarPublisher(transport, sleep=clock.sleep)
    items = [DataCommand("cmd-1", "one"), DataCommand("cmd-2", "two")]

    results = await publisher.publish_data_burst(
        DeviceFamily.INTELLISTAR, items, Broadcast(priority=True)
    )

    assert [result.topic for result in results] == ["wxstar/data/i1/priority"] * 2
    assert [json.loads(entry[1])["data"] for entry in transport.published] == [
        "one",
        "two",
    ]


@pytest.mark.asyncio
async def test_command_burst():
    clock = FakeClock()
    transport = FakeTransport(clock)
    publisher = StarPublisher(transport, sleep=clock.sleep)

    results = await publisher.publish_command_burst(
        DeviceFamily.INTELLISTAR2, ["one", "two", "three"], Unicast("abc")
    )

    assert len(results) == 3
    assert [entry[1] for entry in transport.published] == [
        b'{"cmd":"one"}',
        b'{"cmd":"two"}',
        b'{"cmd":"three"}',
    ]
    assert clock.sleeps == [0.5, 0.5]
