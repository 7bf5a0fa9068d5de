import logging
from logging.handlers import RotatingFileHandler
import os
from typing import Dict, Any, List

LOG_FORMAT = '%(asctime)s | %(name)s | %(levelname)s | %(message)s'
DATE_FORMAT = '%d-%m-%Y %H:%M:%S'

_loggers: Dict[str, logging.Logger] = {}
_handlers: List[logging.Handler] = []


def _build_handlers(logging_config: Dict[str, Any]) -> List[logging.Handler]:
    log_file = logging_config.get("log_file", "logs/migration.log")
    log_level_console = str(logging_config.get("log_level_console", "INFO")).upper()
    log_level_file = str(logging_config.get("log_level_file", "DEBUG")).upper()
    max_bytes = logging_config.get("max_bytes", 5_000_000)
    backup_count = logging_config.get("backup_count", 5)

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    # Console Handler (stderr; stdout carries the migration report)
    ch = logging.StreamHandler()
    ch.setLevel(getattr(logging, log_level_console, logging.INFO))
    ch.setFormatter(formatter)
    handlers = [ch]

    # File Handler
    if log_file:
        log_dir = os.path.dirname(log_file)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
        fh = RotatingFileHandler(log_file, maxBytes=max_bytes, backupCount=backup_count)
        fh.setLevel(getattr(logging, log_level_file, logging.DEBUG))
        fh.setFormatter(formatter)
        handlers.append(fh)

    return handlers


def _attach(logger: logging.Logger):
    for handler in _handlers:
        if handler not in logger.handlers:
            logger.addHandler(handler)


def get_logger(name: str) -> logging.Logger:
    """Return a named logger; handlers are attached once configure_logging() has run."""
    logger = logging.getLogger(name)
    logger.setLevel(logging.DEBUG)
    _loggers[name] = logger
    _attach(logger)
    return logger


def reset_logging():
    for logger in _loggers.values():
        for handler in _handlers:
            logger.removeHandler(handler)
    for handler in _handlers:
        handler.close()
    _handlers.clear()


def configure_logging(logging_config: Dict[str, Any]):
    """
    (Re)build the console and rotating file handlers from the ``logging``
    config section and attach them to every logger handed out so far.
    An empty ``log_file`` disables file logging.
    """
    reset_logging()
    _handlers.extend(_build_handlers(logging_config))
    for logger in _loggers.values():
        _attach(logger)
