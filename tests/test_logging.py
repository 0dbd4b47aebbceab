import logging

import pytest

from wxstar_mqtt.logging import PUBLISHER_LOGGER, configure_logging


@pytest.fixture(autouse=True)
def restore_logging():
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    for handler in list(root.handlers):
        root.removeHandler(handler)
        if handler not in handlers:
            handler.close()
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(level)
    for name in (PUBLISHER_LOGGER, "paho", "wxstar_mqtt.adapters.mqtt.paho"):
        logging.getLogger(name).setLevel(logging.NOTSET)


def test_publisher_level_is_independent_of_root():
    configure_logging("WARNING", publish_level="debug")

    assert logging.getLogger().level == logging.WARNING
    assert logging.getLogger(PUBLISHER_LOGGER).isEnabledFor(logging.DEBUG)
    assert not logging.getLogger("wxstar_mqtt.client").isEnabledFor(logging.INFO)


def test_publisher_inherits_root_level_by_default():
    configure_logging("INFO")

    publisher = logging.getLogger(PUBLISHER_LOGGER)
    assert publisher.level == logging.NOTSET
    assert publisher.getEffectiveLevel() == logging.INFO


def test_unknown_level_falls_back_to_info():
    configure_logging("chatty")

    assert logging.getLogger().level == logging.INFO


def test_network_loggers_quiet_unless_requested():
    configure_logging("DEBUG")
    assert logging.getLogger("paho").level == logging.WARNING

    configure_logging("DEBUG", log_network=True)
    assert logging.getLogger("paho").level == logging.NOTSET


def test_file_handler_writes_log(tmp_path):
    log_path = tmp_path / "logs" / "wxstar.log"
    configure_logging("INFO", log_path=log_path)

    logging.getLogger("wxstar_mqtt.test").info("burst finished")
    for handler in logging.getLogger().handlers:
        handler.flush()

    assert "| INFO | wxstar_mqtt.test | burst finished" in log_path.read_text(
        encoding="utf-8"
    )
