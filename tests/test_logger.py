import logging

from cliniscan.utils.logger import LOG_FORMAT, PACKAGE_LOGGER, get_logger, set_level


def _installed_handlers(logger):
    # other handlers (e.g. a test runner's capture) may be attached too
    return [
        h for h in logger.handlers
        if h.formatter is not None and h.formatter._fmt == LOG_FORMAT
    ]


def test_module_loggers_share_the_package_handler():
    log = get_logger("cliniscan.analyzers.csv")
    get_logger("cliniscan.engine")
    package = logging.getLogger(PACKAGE_LOGGER)

    assert _installed_handlers(log) == []
    assert len(_installed_handlers(package)) == 1
    assert not package.propagate


def test_set_level_controls_every_module():
    log = get_logger("cliniscan.engine")
    try:
        set_level(logging.WARNING)
        assert not log.isEnabledFor(logging.INFO)
        set_level(logging.DEBUG)
        assert log.isEnabledFor(logging.DEBUG)
    finally:
        set_level(logging.INFO)
