"""Command-line interface for wxstar-mqtt."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional

from . import constants
from .adapters import MQTTConnectionError
from .client import BrokerClient
from .config import StarConfig, load_config
from .core import (
    AddressTarget,
    Broadcast,
    CueLoad,
    CueRun,
    CueSpec,
    DataCommand,
    DeviceFamily,
    GenericCommand,
    RoutingError,
    Unicast,
)
from .logging import configure_logging
from .publisher import BurstItem, PublishResult, PublishStatus, resolve_topic

LOGGER = logging.getLogger(__name__)


def _family(value: str) -> DeviceFamily:
    try:
        return DeviceFamily.parse(value)
    except RoutingError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from exc


def _timestamp(value: str) -> datetime:
    try:
        return datetime.fromisoformat(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(
            f"invalid ISO timestamp: {value!r}"
        ) from exc


def _add_routing_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--family",
        type=_family,
        default=DeviceFamily.INTELLISTAR2,
        help="Device family: intellistar (i1), intellistar2 (i2) or weatherstar_xl",
    )
    parser.add_argument(
        "--national", action="store_true", help="Send to the national feed"
    )
    parser.add_argument(
        "--unit", help="Unit identifier; when set the message goes to that unit only"
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=constants.APP_NAME,
        description="Publish WeatherStar data, commands and cues over MQTT",
    )
    parser.add_argument(
        "-c",
        "--config",
        type=Path,
        default=constants.DEFAULT_CONFIG_PATH,
        help=f"Path to configuration file (default: {constants.DEFAULT_CONFIG_PATH})",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    data_parser = subparsers.add_parser("data", help="Publish a data file")
    _add_routing_arguments(data_parser)
    data_parser.add_argument(
        "--priority", action="store_true", help="Use the priority message port"
    )
    data_parser.add_argument(
        "--cmd",
        dest="star_command",
        required=True,
        help="Command to run; {0} is substituted with the filename by the unit",
    )
    source = data_parser.add_mutually_exclusive_group(required=True)
    source.add_argument("--file", type=Path, help="Read the data from a file")
    source.add_argument("--data", help="Inline data string")

    command_parser = subparsers.add_parser("command", help="Publish a command")
    _add_routing_arguments(command_parser)
    command_parser.add_argument(
        "--priority", action="store_true", help="Use the priority message port"
    )
    command_parser.add_argument("star_command", help="Command to run on the unit(s)")

    load_parser = subparsers.add_parser("load-cue", help="Load a presentation cue")
    load_parser.add_argument("--cue-id", required=True, help="Presentation ID")
    load_parser.add_argument(
        "--unit",
        dest="units",
        action="append",
        default=[],
        help="Unit identifier to cue (repeatable)",
    )
    load_parser.add_argument(
        "--duration",
        type=int,
        default=constants.DEFAULT_CUE_DURATION_SECONDS,
        help="Presentation duration in seconds",
    )
    load_parser.add_argument(
        "--flavor", default=constants.DEFAULT_CUE_FLAVOR, help="Presentation flavor"
    )
    load_parser.add_argument(
        "--family",
        type=_family,
        default=None,
        help="Publish on the family cue topic instead of the shared one",
    )

    run_parser = subparsers.add_parser("run-cue", help="Run a loaded presentation")
    run_parser.add_argument("--cue-id", required=True, help="Presentation ID")
    run_parser.add_argument(
        "--start",
        type=_timestamp,
        default=None,
        help="ISO start timestamp (default: now)",
    )
    run_parser.add_argument(
        "--family",
        type=_family,
        default=None,
        help="Publish on the family cue topic instead of the shared one",
    )

    subparsers.add_parser(
        "show-config", help="Print the resolved configuration and exit"
    )

    return parser


def _target(args: argparse.Namespace) -> AddressTarget:
    if args.unit is not None:
        return Unicast(args.unit)
    return Broadcast(
        national=args.national, priority=getattr(args, "priority", False)
    )


def _build_item(args: argparse.Namespace) -> BurstItem:
    """Turn parsed arguments into a routable item without touching the broker."""

    if args.command == "data":
        data = (
            args.file.read_text(encoding="utf-8") if args.file is not None else args.data
        )
        return BurstItem(
            DataCommand(command=args.star_command, data=data),
            args.family,
            _target(args),
        )

    if args.command == "command":
        return BurstItem(GenericCommand(args.star_command), args.family, _target(args))

    if args.command == "load-cue":
        cues = [
            CueSpec(unit_id=unit, duration=args.duration, flavor=args.flavor)
            for unit in args.units
        ]
        return BurstItem(
            CueLoad(cue_id=args.cue_id, cues=cues),
            family=args.family,
            per_family_cues=args.family is not None,
        )

    if args.command == "run-cue":
        return BurstItem(
            CueRun(cue_id=args.cue_id, start_time=args.start or datetime.now()),
            family=args.family,
            per_family_cues=args.family is not None,
        )

    raise ValueError(f"Unknown command: {args.command}")


async def _run(config: StarConfig, item: BurstItem) -> PublishResult:
    async with BrokerClient(config) as client:
        return client.publisher.publish(item)


def main(argv: Optional[list[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    config = load_config(args.config)

    if args.command == "show-config":
        print(f"Configuration loaded from {config.path!s}\n")
        for section in config.raw.sections():
            print(f"[{section}]")
            for key, value in config.raw[section].items():
                if key == "password" and value:
                    value = "********"
                print(f"{key} = {value}")
            print()
        return 0

    configure_logging(
        config.logging.level,
        log_path=config.logging.path,
        log_network=config.logging.log_network,
        publish_level=config.logging.publish_level,
    )

    try:
        item = _build_item(args)
        topic = resolve_topic(item)
    except ValueError as exc:
        # RoutingError, EnvelopeError and an empty unit id are ValueErrors.
        LOGGER.error("Publish rejected: %s", exc)
        return 1
    except OSError as exc:
        LOGGER.error("Cannot read data file: %s", exc)
        return 1

    try:
        result = asyncio.run(_run(config, item))
    except ValueError as exc:
        LOGGER.error("Publish rejected: %s", exc)
        return 1
    except (MQTTConnectionError, OSError, asyncio.TimeoutError) as exc:
        LOGGER.error("Broker error publishing to %s: %r", topic, exc)
        return 1

    if result.status is PublishStatus.SKIPPED:
        LOGGER.warning("Nothing published: %s", result.detail)
    else:
        LOGGER.info("Published to %s", result.topic)
    return 0


if __name__ == "__main__":
    sys.exit(main())
