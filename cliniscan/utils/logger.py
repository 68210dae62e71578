import logging

PACKAGE_LOGGER = "cliniscan"

LOG_FORMAT = "[%(asctime)s] %(levelname)s — %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _package_logger() -> logging.Logger:
    logger = logging.getLogger(PACKAGE_LOGGER)
    if logger.handlers:
        return logger

    logger.setLevel(logging.INFO)

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    logger.addHandler(handler)
    logger.propagate = False

    return logger


def get_logger(name: str):
    """
    Module loggers live under the package logger, which owns the one
    handler; set_level() there controls every module at once.
    """
    _package_logger()
    return logging.getLogger(name)


def set_level(level: int):
    _package_logger().setLevel(level)
