"""Logging setup for the application process."""

import logging

_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """
    Install a single stream handler on the root logger.

    Calling this more than once only updates the level.
    """
    root = logging.getLogger()
    root.setLevel(level.upper())

    if any(getattr(h, "_hoaxify", False) for h in root.handlers):
        return

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(_FORMAT))
    handler._hoaxify = True  # type: ignore[attr-defined]
    root.addHandler(handler)
