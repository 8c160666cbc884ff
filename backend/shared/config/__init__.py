"""
Configuration module: Settings, logging, constants.
"""

from shared.config.settings import settings
from shared.config.logging import get_logger, setup_logging
from shared.config.constants import (
    Limits,
    PageSizes,
    Providers,
    SortFields,
)

__all__ = [
    # settings
    "settings",
    # logging
    "get_logger",
    "setup_logging",
    # constants
    "Limits",
    "PageSizes",
    "Providers",
    "SortFields",
]
