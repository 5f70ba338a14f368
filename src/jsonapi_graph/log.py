import logging
import sys

from .interfaces import WarningSink

log = logging.getLogger("jsonapi_graph")


def init_logging(loglevel: int = logging.WARNING) -> logging.Logger:
    """
    Attaches a stderr handler to the package logger, unless the logger has
    already been configured by the application.
    """
    if log.level == logging.NOTSET:
        handler = logging.StreamHandler(sys.stderr)
        formatter = logging.Formatter("[%(asctime)s] %(levelname)s: %(message)s")
        handler.setFormatter(formatter)
        log.setLevel(loglevel)
        log.addHandler(handler)
    return log


def _discard(message: str) -> None:
    pass


def warning_sink(enabled: bool = True) -> WarningSink:
    """
    Returns the sink the engines report non-fatal problems to.
    """
    return log.warning if enabled else _discard
