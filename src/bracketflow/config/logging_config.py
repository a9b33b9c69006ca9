import logging
import os
from typing import Optional

LIBRARY_LOGGER = "bracketflow"
_DEFAULT_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
_DEFAULT_DATEFMT = "%Y-%m-%d %H:%M:%S"

# Library logging stays silent unless the host configures handlers
logging.getLogger(LIBRARY_LOGGER).addHandler(logging.NullHandler())

_handler: Optional[logging.Handler] = None


def configure_logging(
    level: Optional[str | int] = None,
    fmt: Optional[str] = None,
    datefmt: Optional[str] = None,
) -> str | int:
    """Attach a stream handler to the ``bracketflow`` logger.

    Opt-in for scripts that want to see transaction logs without setting up
    logging themselves. The root logger is left untouched; calling this again
    replaces the handler installed by the previous call.

    Environment overrides:
    - `BRACKETFLOW_LOG_LEVEL` (see `Environment.get_log_level`)
    - `BRACKETFLOW_LOG_FORMAT`
    - `BRACKETFLOW_LOG_DATEFMT`
    """
    from bracketflow.config.environment import Environment

    global _handler

    if isinstance(level, str):
        level = level.upper()
    if level is None:
        level = Environment.get_log_level()

    fmt = fmt or os.getenv("BRACKETFLOW_LOG_FORMAT", _DEFAULT_FORMAT)
    datefmt = datefmt or os.getenv("BRACKETFLOW_LOG_DATEFMT", _DEFAULT_DATEFMT)

    logger = logging.getLogger(LIBRARY_LOGGER)
    if _handler is not None:
        logger.removeHandler(_handler)
    _handler = logging.StreamHandler()
    _handler.setFormatter(logging.Formatter(fmt=fmt, datefmt=datefmt))
    logger.addHandler(_handler)
    logger.setLevel(level)
    return level


def get_logger(name: str) -> logging.Logger:
    """Return a module-scoped logger."""
    return logging.getLogger(name)
