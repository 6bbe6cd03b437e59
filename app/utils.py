"""
Shared helpers.
"""
import logging

from app.core import config


_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"
_configured = False


def _configure_root() -> None:
    global _configured
    if _configured:
        return
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(_FORMAT))
    root = logging.getLogger("app")
    root.addHandler(handler)
    root.setLevel(config.LOG_LEVEL)
    root.propagate = False
    _configured = True


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger under the ``app`` namespace.

    Usage:
        log = get_logger(__name__)
        log.info("Something happened")
    """
    _configure_root()
    if name == "__main__" or not name.startswith("app"):
        name = f"app.{name}"
    return logging.getLogger(name)
