"""Structured logging for dilikey library code."""

import logging

from dilikey import config

_FORMAT = "[%(asctime)s.%(msecs)03d] %(levelname)s [%(name)s]: %(message)s"

_root = logging.getLogger("dilikey")


def _setup_logging():
    """Install the stderr handler once."""
    if not _root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(_FORMAT, datefmt="%H:%M:%S"))
        _root.addHandler(handler)
        _root.setLevel(getattr(logging, config.LOG_LEVEL, logging.WARNING))


def set_level(level: str):
    _setup_logging()
    _root.setLevel(getattr(logging, level.upper(), logging.WARNING))


def get_logger(name: str) -> logging.Logger:
    _setup_logging()
    return logging.getLogger(f"dilikey.{name}")


def log(logger: logging.Logger, level: str, message: str, /, **kwargs):
    """Log with optional k=v context appended to the message."""
    log_method = getattr(logger, level.lower(), logger.info)

    if kwargs:
        context = " ".join([f"{k}={v}" for k, v in kwargs.items()])
        message = f"{message} | {context}"

    log_method(message)
