"""Constants used across the wxstar-mqtt package."""

from __future__ import annotations

from pathlib import Path

APP_NAME = "wxstar-mqtt"
DEFAULT_CONFIG_FILENAME = f"{APP_NAME}.cfg"
DEFAULT_CONFIG_PATH = Path.home() / ".config" / APP_NAME / DEFAULT_CONFIG_FILENAME

DEFAULT_BROKER_HOST = "localhost"
DEFAULT_BROKER_PORT = 1883
DEFAULT_KEEPALIVE_SECONDS = 60
DEFAULT_CONNECT_TIMEOUT_SECONDS = 30.0

DEFAULT_BURST_DELAY_MS = 500

TOPIC_ROOT = "wxstar"
DATA_TOPIC = f"{TOPIC_ROOT}/data"
CUES_TOPIC = f"{TOPIC_ROOT}/cues"

DEFAULT_CUE_DURATION_SECONDS = 3600
DEFAULT_CUE_FLAVOR = "domestic/ldlC"

# Receivers parse centiseconds but the field is always sent as "00".
START_TIME_FORMAT = "%m/%d/%Y %H:%M:%S:00"
