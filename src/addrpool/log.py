import logging

from rich.logging import RichHandler


LOGGER_NAME = "addrpool"


def setup_logging(level: str = "INFO") -> logging.Logger:
    """Route addrpool logs through rich. Safe to call more than once."""
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level.upper())
    if not any(isinstance(h, RichHandler) for h in logger.handlers):
        handler = RichHandler(show_path=False, rich_tracebacks=True)
        handler.setFormatter(logging.Formatter("%(message)s", datefmt="[%X]"))
        logger.addHandler(handler)
        logger.propagate = False
    return logger
