"""Centralized logging configuration using Loguru.

Usage:
    from modlists.utils.logging import logger
    logger.info("Message")
    logger.debug("Debug message")  # Only shows if MODLISTS_LOG_LEVEL=DEBUG

Environment Variables:
    MODLISTS_LOG_LEVEL: DEBUG|INFO|WARNING|ERROR (default: INFO)
    MODLISTS_LOG_JSON: 0|1 (default: 0, human-readable)
    MODLISTS_LOG_FILE: path to log file (optional, NDJSON)
"""

import json
import os
import sys

from loguru import logger

# Remove default handler
logger.remove()

_log_level = os.environ.get("MODLISTS_LOG_LEVEL", "INFO").upper()
_json_mode = os.environ.get("MODLISTS_LOG_JSON", "0") == "1"
_log_file = os.environ.get("MODLISTS_LOG_FILE")


def _to_ndjson(record) -> str:
    """Flatten a loguru record into a single JSON line."""
    line = {
        "level": record["level"].name,
        "time": record["time"].isoformat(),
        "msg": record["message"],
        "pid": record["process"].id,
    }
    for key, value in record["extra"].items():
        line[key] = value
    if record["exception"]:
        line["err"] = {
            "type": record["exception"].type.__name__ if record["exception"].type else "Error",
            "message": str(record["exception"].value) if record["exception"].value else "",
        }
    return json.dumps(line, default=str)


def json_sink(message):
    """Write log records as NDJSON to stdout."""
    # Never call logger.* inside a sink
    sys.stdout.write(_to_ndjson(message.record) + "\n")
    sys.stdout.flush()


_human_format = (
    "<green>{time:HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<level>{message}</level>"
)

logger.level("DEBUG", color="<blue>")
logger.level("INFO", color="<white>")
logger.level("WARNING", color="<yellow>")
logger.level("ERROR", color="<red>")

_human_handler_id: int | None = None

if _json_mode:
    logger.add(json_sink, level=_log_level, colorize=False)
else:
    _human_handler_id = logger.add(
        sys.stderr,
        level=_log_level,
        format=_human_format,
        colorize=None,
    )

if _log_file:

    def _file_sink(message):
        """Append NDJSON records to the configured log file."""
        with open(_log_file, "a", encoding="utf-8") as f:
            f.write(_to_ndjson(message.record) + "\n")

    logger.add(_file_sink, level="DEBUG")


def set_console_level(level: str) -> None:
    """Re-add the human-readable stderr handler at a different level.

    Used by the CLI ``--verbose`` flag. No-op in JSON mode.
    """
    global _human_handler_id

    if _json_mode:
        return

    if _human_handler_id is not None:
        try:
            logger.remove(_human_handler_id)
        except ValueError:
            pass

    _human_handler_id = logger.add(
        sys.stderr,
        level=level.upper(),
        format=_human_format,
        colorize=None,
    )


__all__ = [
    "logger",
    "set_console_level",
]
