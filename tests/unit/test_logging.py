import logging

from transparency.core.logging import LOGGING_CONFIG
from transparency.core.logging import setup_logging


def _handlers_on_path(logger: logging.Logger) -> list[logging.Handler]:
    handlers = []
    current = logger
    while current is not None:
        handlers.extend(current.handlers)
        if not current.propagate:
            break
        current = current.parent
    return handlers


def test_only_package_logger_is_configured():
    app_loggers = [name for name in LOGGING_CONFIG["loggers"] if name.startswith("transparency")]
    assert app_loggers == ["transparency"]


def test_module_loggers_reach_a_single_handler():
    setup_logging()

    for name in ("transparency.api.routes", "transparency.services.pipeline", "transparency.main"):
        handlers = _handlers_on_path(logging.getLogger(name))
        assert len(handlers) == 1
        assert handlers[0] is logging.getLogger("transparency").handlers[0]
