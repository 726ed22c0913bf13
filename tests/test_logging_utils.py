import logging

import pytest

from faceindex.logging_utils import SDK_LOGGERS, configure_logging, resolve_level


@pytest.mark.parametrize(
    "verbosity, env_level, expected",
    [
        (0, None, logging.WARNING),
        (1, None, logging.INFO),
        (3, None, logging.DEBUG),
        (0, "debug", logging.DEBUG),
        (2, "error", logging.ERROR),
        (1, "chatty", logging.INFO),
    ],
)
def test_resolve_level(verbosity, env_level, expected):
    assert resolve_level(verbosity, env_level) == expected


def test_sdk_loggers_stay_quiet_below_debug():
    assert configure_logging(1) == logging.INFO
    assert all(logging.getLogger(name).level == logging.WARNING for name in SDK_LOGGERS)

    assert configure_logging(2) == logging.DEBUG
    assert all(logging.getLogger(name).level == logging.DEBUG for name in SDK_LOGGERS)
