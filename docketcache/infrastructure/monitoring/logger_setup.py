"""Logging configuration for docketcache.

`setup_logging` may run once per CLI invocation in the same process (the
test runner, an embedding application). Handlers it installs are tagged so a
later call swaps them out instead of stacking duplicates, and handlers owned
by anyone else are left alone.
"""

import logging
import sys
from typing import List, Optional

DEFAULT_LOG_LEVEL = logging.INFO
DEFAULT_LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

# Marker attribute set on every handler installed by setup_logging
HANDLER_TAG = '_docketcache_handler'

def owned_handlers(logger: Optional[logging.Logger] = None) -> List[logging.Handler]:
    """Returns the handlers on `logger` (default: root) installed by setup_logging."""
    logger = logger or logging.getLogger()
    return [h for h in logger.handlers if getattr(h, HANDLER_TAG, False)]

def _install(logger: logging.Logger, handler: logging.Handler, level: int, formatter: logging.Formatter) -> None:
    setattr(handler, HANDLER_TAG, True)
    handler.setLevel(level)
    handler.setFormatter(formatter)
    logger.addHandler(handler)

def setup_logging(
    log_level: int = DEFAULT_LOG_LEVEL,
    log_format: str = DEFAULT_LOG_FORMAT,
    log_file: Optional[str] = None
) -> None:
    """Configures the root logger, replacing handlers from any earlier call.

    Args:
        log_level: Minimum level for the root logger and its handlers.
        log_format: Format string for log records.
        log_file: Optional path of a file that receives the same records.
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    for handler in owned_handlers(root_logger):
        root_logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(log_format)

    # stderr, so log lines never interleave with console output on stdout
    _install(root_logger, logging.StreamHandler(sys.stderr), log_level, formatter)

    if log_file:
        try:
            _install(root_logger, logging.FileHandler(log_file, encoding='utf-8'), log_level, formatter)
            logging.info(f"Logging to file: {log_file}")
        except OSError as e:
            logging.error(f"Failed to set up file logging to {log_file}: {e}", exc_info=True)

    logging.debug(f"Logging configured. Level={logging.getLevelName(log_level)}")
