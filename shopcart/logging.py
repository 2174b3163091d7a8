"""
Logging setup for shopcart.

    from shopcart.logging import get_logger
    logger = get_logger(__name__)
"""

import logging
import sys
from functools import cache

from shopcart import config

# Production log collectors add their own timestamps
_FORMATS = {
    "production": "%(levelname)s - %(name)s - %(message)s",
    "development": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
}
_CONTROL_CHARS = str.maketrans({"\n": "\\n", "\r": "\\r", "\t": "\\t", "\x00": None})


def _configure_root_logger() -> None:
    root = logging.getLogger()
    if root.handlers:
        return

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(_FORMATS.get(config.SHOPCART_ENV, _FORMATS["development"])))
    root.addHandler(handler)
    root.setLevel(getattr(logging, config.LOG_LEVEL, logging.INFO))

    # One request per stock lookup; keep the HTTP client quiet
    for noisy in ("httpx", "httpcore"):
        logging.getLogger(noisy).setLevel(logging.WARNING)


_configure_root_logger()


@cache
def get_logger(name: str) -> logging.Logger:
    """Get a module logger (typically called with __name__)."""
    return logging.getLogger(name)


def sanitize_id_for_logging(id_value: object, max_length: int = 32) -> str:
    """
    Make a caller-supplied product id safe to log.

    Control characters are escaped so a crafted id cannot forge log lines
    (CWE-117), and long values are truncated.
    """
    if id_value is None or id_value == "":
        return "N/A"
    safe_value = str(id_value).translate(_CONTROL_CHARS)
    if len(safe_value) <= max_length:
        return safe_value
    return safe_value[:max_length] + "..."
