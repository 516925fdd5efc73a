"""Centralized constants for modlists.

Single source of truth for directory names, file locations and the
cache retention window.
"""

from pathlib import Path

# ============================================================================
# OUTPUT LAYOUT (relative to the build output directory)
# ============================================================================

# Raw fetched pages, one file per sanitized URL
CACHE_DIR_NAME = "devdata"

# Generated modules live under lib/<namespace-path>/
LIB_DIR_NAME = "lib"

# ============================================================================
# STATE
# ============================================================================

STATE_DIR = Path("./.modlists")

ERROR_LOG_FILE = STATE_DIR / "error.log"

DEFAULT_INDEX_DB = Path.home() / ".modlists" / "index.db"

# ============================================================================
# CACHE
# ============================================================================

CACHE_MAX_AGE_DAYS = 30

# ============================================================================
# HTTP
# ============================================================================

DEFAULT_HTTP_TIMEOUT = 30

# ============================================================================
# ENVIRONMENT VARIABLES
# ============================================================================

ENV_PREFIX = "MODLISTS_"
