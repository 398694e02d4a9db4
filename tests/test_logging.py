import logging

from stallmap import setup_logging


def test_setup_logging_is_idempotent():
    logger = setup_logging(logging.DEBUG)
    setup_logging(logging.DEBUG)
    assert logger is logging.getLogger("stallmap")
    assert len(logger.handlers) == 1
    assert logger.level == logging.DEBUG
    assert logging.getLogger("stallmap.canvas").getEffectiveLevel() == logging.DEBUG
    setup_logging(logging.INFO)
    assert logger.level == logging.INFO
