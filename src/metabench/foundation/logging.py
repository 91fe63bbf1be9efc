from __future__ import annotations

import logging

LOGGER_NAME = "metabench"
_PLAIN_FORMAT = "%(message)s"
_DEBUG_FORMAT = "%(levelname)s %(name)s: %(message)s"


def configure_metabench_logging(*, level: int = logging.INFO, force: bool = False) -> logging.Logger:
    """
    Attach a console handler to the ``metabench`` logger and return it.

    Library modules never configure logging themselves; this is for scripts and
    the command line. Nothing is attached when the root logger or the
    ``metabench`` logger already has handlers, unless ``force`` is set.
    At DEBUG level records carry their level and logger name.
    """
    root = logging.getLogger()
    logger = logging.getLogger(LOGGER_NAME)

    if (root.handlers or logger.handlers) and not force:
        logger.setLevel(level)
        return logger

    for existing in list(logger.handlers):
        logger.removeHandler(existing)
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(_DEBUG_FORMAT if level <= logging.DEBUG else _PLAIN_FORMAT))
    logger.addHandler(handler)
    logger.setLevel(level)
    logger.propagate = False
    return logger


__all__ = ["LOGGER_NAME", "configure_metabench_logging"]
