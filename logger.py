import logging
import sys

LOG_FORMAT = "[%(levelname)s] %(asctime)s - %(name)s - %(message)s"
ROOT_LOGGER_NAME = "heaps"

_root_logger = logging.getLogger(ROOT_LOGGER_NAME)


def _setup_root_logger():
    if _root_logger.handlers:
        return
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    _root_logger.addHandler(handler)
    _root_logger.setLevel(logging.INFO)
    _root_logger.propagate = False


def init_logger(name: str) -> logging.Logger:
    """Return a logger under the `heaps` hierarchy for the given module name."""
    _setup_root_logger()
    if name == ROOT_LOGGER_NAME or name.startswith(ROOT_LOGGER_NAME + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")


def set_log_level(level) -> None:
    if isinstance(level, str):
        level = level.upper()
    _root_logger.setLevel(level)


def print_(*args):
    """Debug print routed through the `heaps` logger."""
    _setup_root_logger()
    _root_logger.debug(" ".join(str(arg) for arg in args))
