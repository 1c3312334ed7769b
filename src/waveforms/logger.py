# SPDX-FileCopyrightText: Copyright (C) ARDUINO SRL (http://www.arduino.cc)
#
# SPDX-License-Identifier: MPL-2.0

import logging

_ROOT_NAME = "waveforms"
_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

_loggers: dict[str, logging.Logger] = {}


def Logger(name: str, level: int = logging.INFO) -> logging.Logger:
    """
    Get a package logger with a console handler attached.

    Loggers are cached by name, so calling this twice with the same name returns
    the same instance and never duplicates handlers.

    Args:
        name (str): Logger name, nested under the "waveforms" hierarchy.
        level (int): Logging level (default: logging.INFO).

    Returns:
        logging.Logger: The configured logger.
    """
    if name in _loggers:
        return _loggers[name]

    logger = logging.getLogger(f"{_ROOT_NAME}.{name}")
    logger.setLevel(level)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(_FORMAT))
        logger.addHandler(handler)
    logger.propagate = False

    _loggers[name] = logger
    return logger


def set_log_level(level: int) -> None:
    """Set the level of every logger created through Logger()."""
    for logger in _loggers.values():
        logger.setLevel(level)


__all__ = ["Logger", "set_log_level"]
