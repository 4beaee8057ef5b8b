"""Logging setup shared by every docedit module.

The root logger is configured once, on first use, unless the host
application already installed handlers. `DOCEDIT_LOG_LEVEL` overrides the
default INFO level.
"""
from __future__ import annotations

import logging
import os
from typing import Optional

_LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def _level_from_env() -> int:
    name = os.environ.get("DOCEDIT_LOG_LEVEL", "INFO").upper()
    level = logging.getLevelName(name)
    return level if isinstance(level, int) else logging.INFO


def get_logger(name: Optional[str] = None) -> logging.Logger:
    logger = logging.getLogger(name)
    if not logging.getLogger().handlers:
        logging.basicConfig(level=_level_from_env(), format=_LOG_FORMAT)
    return logger
