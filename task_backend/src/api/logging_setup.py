from __future__ import annotations

import logging
import sys

_FORMAT = "%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s"
_DATEFMT = "%Y-%m-%d %H:%M:%S"

# Handlers are attached to the package logger, not the root logger, so that
# uvicorn/pytest keep control over their own output.
PACKAGE_LOGGER = "src.api"


# PUBLIC_INTERFACE
def setup_logging(level: str = "INFO") -> logging.Logger:
    """
    Configure the application logger with a single stderr handler.

    Safe to call more than once (e.g. one app per test): the handler installed
    by a previous call is replaced rather than duplicated.
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    for h in list(logger.handlers):
        if getattr(h, "_task_backend_handler", False):
            logger.removeHandler(h)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(fmt=_FORMAT, datefmt=_DATEFMT))
    handler._task_backend_handler = True  # type: ignore[attr-defined]
    logger.addHandler(handler)
    return logger
