import logging

from cuescore.logging_config import configure_logging


def test_explicit_level_applies_to_package_and_extras():
    logger = configure_logging(level="debug", extra_loggers=["cuescore.test_extra"])

    assert logger.name == "cuescore"
    assert logger.level == logging.DEBUG
    assert logging.getLogger("cuescore.test_extra").level == logging.DEBUG

    configure_logging(level="WARNING")
    assert logger.level == logging.WARNING
