"""Package-wide logging helpers."""

from __future__ import annotations

import logging
import os
from typing import Optional, Union

_ROOT_LOGGER_NAME = "pairrank"
_DEFAULT_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
_configured = False


def _resolve_level(level: Union[str, int]) -> int:
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(str(level).strip().upper())
    if not isinstance(resolved, int):
        raise ValueError(f"Unknown log level: {level!r}")
    return resolved


def _configure_root() -> logging.Logger:
    global _configured
    root = logging.getLogger(_ROOT_LOGGER_NAME)
    if not _configured:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(_DEFAULT_FORMAT))
        root.addHandler(handler)
        root.propagate = False
        env_level = os.getenv("PAIRRANK_LOG_LEVEL", "WARNING")
        try:
            root.setLevel(_resolve_level(env_level))
        except ValueError:
            root.setLevel(logging.WARNING)
        _configured = True
    return root


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return a logger under the ``pairrank`` namespace.

    Module names that already start with ``pairrank`` are used as-is so
    ``get_logger(__name__)`` does the right thing inside the package.
    """

    root = _configure_root()
    if not name or name == _ROOT_LOGGER_NAME:
        return root
    if not name.startswith(_ROOT_LOGGER_NAME + "."):
        name = f"{_ROOT_LOGGER_NAME}.{name}"
    return logging.getLogger(name)


def set_log_level(level: Union[str, int]) -> None:
    """Set the verbosity of every pairrank logger."""

    _configure_root().setLevel(_resolve_level(level))
