"""modlists utilities package."""

from .constants import (
    CACHE_DIR_NAME,
    CACHE_MAX_AGE_DAYS,
    DEFAULT_INDEX_DB,
    ERROR_LOG_FILE,
    LIB_DIR_NAME,
    STATE_DIR,
)
from .error_handler import handle_exceptions
from .exit_codes import ExitCodes
from .logging import logger

__all__ = [
    "CACHE_DIR_NAME",
    "CACHE_MAX_AGE_DAYS",
    "DEFAULT_INDEX_DB",
    "ERROR_LOG_FILE",
    "LIB_DIR_NAME",
    "STATE_DIR",
    "handle_exceptions",
    "ExitCodes",
    "logger",
]
