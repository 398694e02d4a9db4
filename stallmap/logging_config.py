"""Console logging for the ``stallmap`` logger tree."""
import logging
import sys

_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"


def setup_logging(level: int = logging.INFO) -> logging.Logger:
    logger = logging.getLogger("stallmap")
    logger.setLevel(level)
    # calling twice replaces the handler instead of doubling every line
    for h in list(logger.handlers):
        logger.removeHandler(h)
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(_FORMAT, datefmt="%H:%M:%S"))
    logger.addHandler(handler)
    logger.debug("logging at %s", logging.getLevelName(level))
    return logger
