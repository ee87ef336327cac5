import logging
import os

from rich.logging import RichHandler


class CenteredFormatter(logging.Formatter):
    """Pads logger names to the widest name seen so far, centred."""

    width = 14

    def __init__(self, fmt=None, datefmt=None, style="%", initial_width=14):
        super().__init__(fmt, datefmt, style)
        CenteredFormatter.width = initial_width

    def format(self, record):
        CenteredFormatter.width = max(CenteredFormatter.width, len(record.name))
        record.name = record.name.center(CenteredFormatter.width)
        return super().format(record)


def _log_level() -> int:
    if os.getenv("DEBUG"):
        return logging.DEBUG
    name = os.getenv("URBANAURA_LOG_LEVEL", "INFO").upper()
    return logging.getLevelNamesMapping().get(name, logging.INFO)


def get_logger(name=None) -> logging.Logger:
    """
    Return a logger writing through a RichHandler.
    Handlers are attached once per logger name.
    """
    name = name or "urbanaura"
    logger = logging.getLogger(name)
    level = _log_level()
    logger.setLevel(level)

    if not logger.handlers:
        handler = RichHandler(
            show_time=True,
            show_level=True,
            show_path=False,
            rich_tracebacks=True,
            log_time_format="[%X]",
        )
        handler.setFormatter(CenteredFormatter("[%(name)s]  %(message)s"))
        handler.setLevel(level)
        logger.addHandler(handler)
        logger.propagate = False
        logger.debug(f"Logger '{name}' ready.")

    return logger
