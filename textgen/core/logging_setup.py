# logging for the textgen package only; the host's root logger is left alone
# records still propagate, so an embedding app (or pytest's caplog) sees them too

import logging
import sys

PACKAGE_LOGGER = "textgen"
_FORMAT = "[%(asctime)s] %(levelname)s %(name)s: %(message)s"


def setup_logging(level: int | str = logging.INFO, name: str = PACKAGE_LOGGER) -> logging.Logger:
    logger = logging.getLogger(name)
    # create_app may run more than once per process; keep a single handler
    logger.handlers.clear()
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(_FORMAT))
    logger.addHandler(handler)
    logger.setLevel(level)
    return logger
