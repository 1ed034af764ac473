"""
Logging configuration for the application.

``setup_logging`` attaches a console handler to the root logger.  It is
safe to call more than once; only the first call has an effect.
"""

import logging


def setup_logging(level: str = "INFO") -> None:
    """Configure the root logger.

    ``level`` is a level name such as ``"DEBUG"`` or ``"info"``; unknown
    names fall back to ``INFO``.
    """
    logger = logging.getLogger()
    if logger.handlers:
        return

    logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    handler = logging.StreamHandler()
    handler.setFormatter(
        logging.Formatter(
            fmt="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )
    logger.addHandler(handler)
