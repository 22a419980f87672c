import os
import sys
import logging

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

_handler = None


def configure_logging(level=None):
    """
    Attach a stdout handler to the root logger, once.

    The level comes from `level`, else the LOGLEVEL environment variable, else INFO.
    Library modules only create loggers; scripts call this.
    """
    global _handler

    level = (level or os.environ.get("LOGLEVEL", "INFO")).upper()

    console_logger = logging.getLogger()
    console_logger.setLevel(level)

    if _handler is None:
        _handler = logging.StreamHandler(sys.stdout)
        _handler.setFormatter(logging.Formatter(LOG_FORMAT))
        console_logger.addHandler(_handler)
    _handler.setLevel(level)

    return console_logger
