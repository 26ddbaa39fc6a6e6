"""Logging configuration helpers."""

import logging

LOGGER_NAME = "nutrition_insights"
LOG_FORMAT = "%(asctime)s %(levelname)s: %(name)s: %(message)s"

# Supabase and OpenAI log every HTTP request at INFO through these.
_CHATTY_LOGGERS = ("httpx", "httpcore", "openai")


def configure_logging(level: int | str = logging.INFO) -> None:
    """Attach one stream handler to the package logger.

    Safe to call repeatedly; later calls only change the level.
    """
    resolved = logging.getLevelName(level.upper()) if isinstance(level, str) else level
    if not isinstance(resolved, int):
        raise ValueError(f"Unknown log level: {level}")

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(resolved)
    for name in _CHATTY_LOGGERS:
        logging.getLogger(name).setLevel(max(resolved, logging.WARNING))
    if logger.handlers:
        return
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
    logger.propagate = False
