import logging

import pytest

from framescribe.utils.logger import setup_logging


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield root
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.mark.parametrize("name,expected", [("debug", logging.DEBUG), ("ERROR", logging.ERROR), ("bogus", logging.INFO)])
def test_setup_logging_level(restore_root_logger, name, expected):
    logger = setup_logging(name)

    assert logger.level == expected
    assert len(logger.handlers) == 1


def test_setup_logging_reads_environment(restore_root_logger, monkeypatch):
    monkeypatch.setenv("LOG_LEVEL", "warning")

    assert setup_logging().level == logging.WARNING
