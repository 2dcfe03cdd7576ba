import logging
import sys
from pathlib import Path

import pytest

from docketcache.infrastructure.monitoring.logger_setup import owned_handlers, setup_logging


@pytest.fixture
def root_logger():
    """Root logger; the autouse isolated_config fixture restores its handlers."""
    logger = logging.getLogger()
    yield logger
    for handler in owned_handlers(logger):
        logger.removeHandler(handler)
        handler.close()

def test_sets_level_and_installs_stream_handler(root_logger: logging.Logger):
    setup_logging(log_level=logging.DEBUG)

    assert root_logger.level == logging.DEBUG
    handlers = owned_handlers(root_logger)
    assert len(handlers) == 1
    assert isinstance(handlers[0], logging.StreamHandler)
    assert handlers[0].level == logging.DEBUG
    assert handlers[0].stream is sys.stderr

def test_repeated_calls_do_not_stack_handlers(root_logger: logging.Logger):
    setup_logging()
    first = owned_handlers(root_logger)
    setup_logging(log_level=logging.WARNING)

    handlers = owned_handlers(root_logger)
    assert len(handlers) == 1
    assert handlers[0] is not first[0]
    assert root_logger.level == logging.WARNING

def test_foreign_handlers_are_kept(root_logger: logging.Logger):
    foreign = logging.NullHandler()
    root_logger.addHandler(foreign)
    try:
        setup_logging()
        setup_logging()
        assert foreign in root_logger.handlers
        assert foreign not in owned_handlers(root_logger)
    finally:
        root_logger.removeHandler(foreign)

def test_file_handler_written_and_replaced(root_logger: logging.Logger, tmp_path: Path):
    log_file = tmp_path / "docketcache.log"

    setup_logging(log_file=str(log_file))
    setup_logging(log_file=str(log_file))
    logging.getLogger("docketcache.test").info("sweep finished")

    file_handlers = [h for h in owned_handlers(root_logger) if isinstance(h, logging.FileHandler)]
    assert len(file_handlers) == 1
    file_handlers[0].flush()
    assert "sweep finished" in log_file.read_text(encoding="utf-8")

def test_unwritable_log_file_falls_back_to_stream(root_logger: logging.Logger, tmp_path: Path):
    setup_logging(log_file=str(tmp_path / "missing-dir" / "docketcache.log"))

    handlers = owned_handlers(root_logger)
    assert len(handlers) == 1
    assert not isinstance(handlers[0], logging.FileHandler)
