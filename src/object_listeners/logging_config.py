import logging
import os
import sys
from typing import Optional, Union

from .settings import _as_level, get_settings

logger = logging.getLogger(__name__)


def configure_logging(level: Optional[Union[int, str]] = None) -> None:
    """Configure the root logger with a single stdout handler.

    The level comes from ``level`` if given, else the OL_LOG_LEVEL env var,
    else the process settings.
    """
    if level is None:
        level = os.getenv("OL_LOG_LEVEL") or get_settings().log_level
    if isinstance(level, str):
        try:
            level = logging.getLevelName(_as_level(level))
        except ValueError as exc:
            logger.error("%s; using WARNING", exc)
            level = logging.WARNING

    handler = logging.StreamHandler(stream=sys.stdout)
    formatter = logging.Formatter(
        fmt="%(asctime)s | %(levelname)-8s | %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )
    handler.setFormatter(formatter)

    root = logging.getLogger()
    root.setLevel(level)
    # Remove existing handlers to avoid duplicates on repeated calls
    for h in list(root.handlers):
        root.removeHandler(h)
    root.addHandler(handler)
