"""Runtime configuration for modlists - centralized configuration management."""

import copy
import json
import os
from pathlib import Path
from typing import Any

from modlists.utils.constants import DEFAULT_HTTP_TIMEOUT, DEFAULT_INDEX_DB, ENV_PREFIX
from modlists.utils.logging import logger

DEFAULTS = {
    "paths": {
        "index_db": str(DEFAULT_INDEX_DB),
    },
    "http": {
        "user_agent": "",
        "timeout": DEFAULT_HTTP_TIMEOUT,
    },
}


def load_runtime_config(root: str = ".") -> dict[str, Any]:
    """
    Load runtime configuration from .modlists/config.json and environment variables.

    Config priority (highest to lowest):
    1. Environment variables (MODLISTS_<SECTION>_<KEY>)
    2. .modlists/config.json file
    3. Built-in defaults

    Args:
        root: Root directory to look for config file

    Returns:
        Configuration dictionary with merged values
    """
    cfg = copy.deepcopy(DEFAULTS)

    path = Path(root) / ".modlists" / "config.json"
    try:
        if path.exists():
            with open(path, encoding="utf-8") as f:
                user = json.load(f)

            if isinstance(user, dict):
                for section in cfg:
                    if section in user and isinstance(user[section], dict):
                        for key, value in user[section].items():
                            if key in cfg[section] and isinstance(value, type(cfg[section][key])):
                                cfg[section][key] = value
    except (json.JSONDecodeError, OSError) as e:
        logger.warning("Could not load config file from {path}: {err}", path=str(path), err=e)
        logger.info("Continuing with default configuration")

    for section in cfg:
        for key in cfg[section]:
            env_var = f"{ENV_PREFIX}{section.upper()}_{key.upper()}"
            if env_var in os.environ:
                value = os.environ[env_var]
                try:
                    if isinstance(cfg[section][key], int):
                        cfg[section][key] = int(value)
                    else:
                        cfg[section][key] = value
                except ValueError as e:
                    logger.warning(
                        "Invalid value for environment variable {var}: '{value}' - {err}",
                        var=env_var,
                        value=value,
                        err=e,
                    )
                    logger.info("Using default value: {default}", default=cfg[section][key])

    return cfg
