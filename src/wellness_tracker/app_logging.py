"""Logging configuration helpers."""

import logging

_PACKAGE_LOGGER = "wellness_tracker"
_FORMAT = "%(asctime)s %(levelname)s: %(name)s: %(message)s"

# httpx logs every request at INFO; health probes would flood the output.
_NOISY_LOGGERS = ("httpx", "httpcore")


def configure_logging(level: str | int = logging.INFO) -> logging.Logger:
    """Attach one stream handler to the package logger and set its level.

    Repeated calls only adjust the level, so both the client container and
    the service app can call it.
    """
    logger = logging.getLogger(_PACKAGE_LOGGER)
    logger.setLevel(_resolve_level(level))
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
    if logger.handlers:
        return logger
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(_FORMAT))
    logger.addHandler(handler)
    logger.propagate = False
    return logger


def _resolve_level(level: str | int) -> int:
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(level.strip().upper())
    if not isinstance(resolved, int):
        raise ValueError(f"Unknown log level: {level}")
    return resolved
