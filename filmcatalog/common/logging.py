# filmcatalog/common/logging.py
from __future__ import annotations

import logging
from typing import Optional

from filmcatalog.common.settings import get_settings

ROOT_LOGGER = "filmcatalog"


def get_logger(name: Optional[str] = None, level: Optional[int | str] = None) -> logging.Logger:
    """
    Return a logger under the "filmcatalog" namespace that plays nice with Uvicorn.
    If no handlers are set anywhere, we add a basicConfig once. The level
    defaults to Settings.log_level.
    """
    if level is None:
        level = get_settings().log_level.upper()
    if not logging.getLogger().handlers:
        logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    root = logging.getLogger(ROOT_LOGGER)
    root.setLevel(level)
    if not name or name == ROOT_LOGGER:
        return root
    if not name.startswith(f"{ROOT_LOGGER}."):
        name = f"{ROOT_LOGGER}.{name}"
    return logging.getLogger(name)
