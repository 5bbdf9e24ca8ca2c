"""
Logging configuration for the ledger.

Every module logs under the ``ledger`` namespace. Until ``configure_logging``
runs the namespace only carries a NullHandler, so importing the reports from
another program stays silent.
"""
import logging
import sys

ROOT_LOGGER = "ledger"
LOG_FORMAT = "[{asctime}] {levelname} {name} {message}"

logging.getLogger(ROOT_LOGGER).addHandler(logging.NullHandler())


def get_logger(name: str) -> logging.Logger:
    if not name.startswith(ROOT_LOGGER):
        name = f"{ROOT_LOGGER}.{name}"
    return logging.getLogger(name)


def configure_logging(level: str = "INFO") -> logging.Logger:
    """Attach one console handler to the ledger logger. Safe to call twice."""
    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(level.upper())

    for handler in logger.handlers:
        if getattr(handler, "_ledger_console", False):
            return logger

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, style="{"))
    handler._ledger_console = True
    logger.addHandler(handler)
    return logger
